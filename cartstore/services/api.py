"""Shop API client - product catalog and stock lookups over HTTP.

All methods use async/await with a shared httpx.AsyncClient.
"""

from typing import Protocol

import httpx
from pydantic import ValidationError

from cartstore.config import Settings, load_settings
from cartstore.errors import CatalogLookupFailed, LookupFailed, StockLookupFailed
from cartstore.logging import get_logger, sanitize_string_for_logging
from cartstore.services.models import ProductRecord, StockRecord

logger = get_logger(__name__)


class ProductCatalog(Protocol):
    """Resolves a product id to its display record."""

    async def get_product(self, product_id: int) -> ProductRecord: ...


class StockService(Protocol):
    """Resolves a product id to its currently available quantity."""

    async def get_stock(self, product_id: int) -> StockRecord: ...


class ShopApiClient:
    """HTTP client for the shop API (`products/{id}` and `stock/{id}`).

    Implements both ProductCatalog and StockService. Every failure, whether
    an unknown id, a transport error or a malformed payload, is raised as
    the matching LookupFailed subclass.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or load_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout

        # An injected client belongs to the caller and is not closed here
        self._http_client: httpx.AsyncClient | None = client
        self._owns_client = client is None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    async def _get_json(self, path: str, product_id: int, error_cls: type[LookupFailed]) -> dict:
        client = await self._get_http_client()
        try:
            response = await client.get(f"{self.base_url}{path}")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Shop API returned %s for %s", e.response.status_code, sanitize_string_for_logging(path)
            )
            raise error_cls(product_id, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.warning("Shop API network error for %s: %s", sanitize_string_for_logging(path), e)
            raise error_cls(product_id, f"network error: {e!s}") from e
        except ValueError as e:
            # Body was not JSON
            raise error_cls(product_id, "invalid JSON response") from e

        if not isinstance(data, dict):
            raise error_cls(product_id, "unexpected response shape")
        return data

    async def get_product(self, product_id: int) -> ProductRecord:
        """Fetch the display record of a product."""
        data = await self._get_json(f"/products/{product_id}", product_id, CatalogLookupFailed)
        try:
            return ProductRecord(**data)
        except ValidationError as e:
            raise CatalogLookupFailed(product_id, "invalid product record") from e

    async def get_stock(self, product_id: int) -> StockRecord:
        """Fetch the available quantity of a product."""
        data = await self._get_json(f"/stock/{product_id}", product_id, StockLookupFailed)
        try:
            return StockRecord(**data)
        except ValidationError as e:
            raise StockLookupFailed(product_id, "invalid stock record") from e

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
