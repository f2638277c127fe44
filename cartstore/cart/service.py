"""Cart store: stock-checked cart mutations with persistence and publishing."""
import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional

from cartstore.config import Settings, load_settings
from cartstore.errors import (
    ERROR_ADDING_PRODUCT,
    ERROR_CHANGING_AMOUNT,
    ERROR_OUT_OF_STOCK,
    ERROR_REMOVING_PRODUCT,
    CartErrorKind,
    LookupFailed,
    StorageError,
)
from cartstore.logging import get_logger
from cartstore.services.api import ProductCatalog, ShopApiClient, StockService
from cartstore.services.models import ProductRecord, StockRecord
from cartstore.services.notifications import LoggingNotificationSink, NotificationSink
from .models import Cart, CartLine, cart_size, cart_total, dump_cart, find_line, load_cart
from .storage import CartStorage, get_cart_storage

logger = get_logger(__name__)

Subscriber = Callable[[Cart], None]


@dataclass(frozen=True)
class CartResult:
    """Outcome of a cart operation.

    `cart` is always the store's cart after the operation: the new value on
    success, the untouched one on failure.
    """
    ok: bool
    cart: Cart
    changed: bool = False
    error: Optional[CartErrorKind] = None
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, cart: Cart, changed: bool = True) -> "CartResult":
        return cls(ok=True, cart=cart, changed=changed)

    @classmethod
    def failure(cls, cart: Cart, error: CartErrorKind, message: str) -> "CartResult":
        return cls(ok=False, cart=cart, error=error, message=message)


class CartStore:
    """
    Owns the cart and is the only writer of its storage slot.

    Features:
    - Stock is checked against the stock service on add and update
    - Every accepted mutation is saved, then published to subscribers
    - Failures come back as CartResult and are forwarded to the notifier
    - Add/update on the same product run one at a time
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        stock: StockService,
        storage: CartStorage,
        notifier: NotificationSink | None = None,
    ):
        self.catalog = catalog
        self.stock = stock
        self.storage = storage
        self.notifier = notifier
        self._subscribers: list[Subscriber] = []
        # product id -> (lock, number of operations holding or waiting on it)
        self._locks: dict[int, tuple[asyncio.Lock, int]] = {}
        self._cart: Cart = self._hydrate()

    def _hydrate(self) -> Cart:
        """Read the stored cart once. Read errors propagate."""
        payload = self.storage.load()
        if not payload:
            return ()
        try:
            cart = load_cart(payload)
        except (ValueError, KeyError, TypeError) as e:
            # Corrupted data - start empty, the next mutation overwrites it
            logger.warning(f"Ignoring unreadable stored cart: {e}")
            return ()
        logger.info("Restored cart with %d line(s)", len(cart))
        return cart

    @property
    def cart(self) -> Cart:
        """Current cart snapshot."""
        return self._cart

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call `callback` with every new cart. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @asynccontextmanager
    async def _product_lock(self, product_id: int) -> AsyncIterator[None]:
        """Serialize operations on one product; the entry is dropped once idle."""
        lock, users = self._locks.get(product_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[product_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[product_id]
            if users == 1:
                del self._locks[product_id]
            else:
                self._locks[product_id] = (lock, users - 1)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def add_product(self, product_id: int) -> CartResult:
        """Add one unit of a product, fetching its display record if it is new."""
        async with self._product_lock(product_id):
            if find_line(self._cart, product_id) is None:
                return await self._add_new_line(product_id)

            stock = await self._fetch_stock(product_id)
            if stock is None:
                return self._fail(CartErrorKind.STOCK_LOOKUP_FAILED, ERROR_ADDING_PRODUCT, product_id)

            # Re-read after the await; a remove may have run meanwhile
            line = find_line(self._cart, product_id)
            if line is None:
                return self._fail(CartErrorKind.CART_CHANGED, ERROR_ADDING_PRODUCT, product_id)

            if stock.amount <= line.amount:
                return self._fail(CartErrorKind.OUT_OF_STOCK, ERROR_OUT_OF_STOCK, product_id)

            new_line = line.with_amount(line.amount + 1)
            new_cart = tuple(new_line if item.product_id == product_id else item for item in self._cart)
            return self._commit(new_cart, ERROR_ADDING_PRODUCT, f"add product {product_id}")

    async def _add_new_line(self, product_id: int) -> CartResult:
        product = await self._fetch_product(product_id)
        if product is None:
            return self._fail(CartErrorKind.CATALOG_LOOKUP_FAILED, ERROR_ADDING_PRODUCT, product_id)

        new_cart = self._cart + (CartLine.from_product(product),)
        return self._commit(new_cart, ERROR_ADDING_PRODUCT, f"add product {product_id}")

    def remove_product(self, product_id: int) -> CartResult:
        """Drop a product's line from the cart."""
        if find_line(self._cart, product_id) is None:
            return self._fail(CartErrorKind.PRODUCT_NOT_FOUND, ERROR_REMOVING_PRODUCT, product_id)

        new_cart = tuple(line for line in self._cart if line.product_id != product_id)
        return self._commit(new_cart, ERROR_REMOVING_PRODUCT, f"remove product {product_id}")

    async def update_product_amount(self, product_id: int, amount: int) -> CartResult:
        """Set a line's amount. Amounts below 1 are ignored without notice."""
        if amount <= 0:
            return CartResult.success(self._cart, changed=False)

        async with self._product_lock(product_id):
            stock = await self._fetch_stock(product_id)
            if stock is None:
                return self._fail(CartErrorKind.STOCK_LOOKUP_FAILED, ERROR_CHANGING_AMOUNT, product_id)

            if stock.amount < amount:
                return self._fail(CartErrorKind.OUT_OF_STOCK, ERROR_OUT_OF_STOCK, product_id)

            # Without a matching line the cart is saved and published unchanged
            new_cart = tuple(
                line.with_amount(amount) if line.product_id == product_id else line
                for line in self._cart
            )
            return self._commit(new_cart, ERROR_CHANGING_AMOUNT, f"set product {product_id} amount to {amount}")

    def get_cart_summary(self) -> dict:
        """Plain-data view of the cart for display."""
        cart = self._cart
        return {
            "is_empty": not cart,
            "size": cart_size(cart),
            "total_items": sum(line.amount for line in cart),
            "items": [
                {
                    "product_id": line.product_id,
                    "title": line.title,
                    "image": line.image,
                    "amount": line.amount,
                    "price": line.price,
                    "subtotal": line.subtotal,
                }
                for line in cart
            ],
            "total": cart_total(cart),
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fetch_stock(self, product_id: int) -> StockRecord | None:
        try:
            return await self.stock.get_stock(product_id)
        except LookupFailed as e:
            logger.warning(f"Stock lookup failed: {e}")
        except Exception:
            logger.exception("Unexpected stock service error for product %s", product_id)
        return None

    async def _fetch_product(self, product_id: int) -> ProductRecord | None:
        try:
            return await self.catalog.get_product(product_id)
        except LookupFailed as e:
            logger.warning(f"Catalog lookup failed: {e}")
        except Exception:
            logger.exception("Unexpected catalog service error for product %s", product_id)
        return None

    def _commit(self, new_cart: Cart, failure_message: str, action: str) -> CartResult:
        """Save then publish. Memory only moves once the save succeeded."""
        try:
            self.storage.save(dump_cart(new_cart))
        except StorageError as e:
            logger.error(f"Failed to persist cart ({action}): {e}")
            return self._fail(CartErrorKind.STORAGE_FAILED, failure_message)
        except Exception:
            logger.exception("Unexpected storage error (%s)", action)
            return self._fail(CartErrorKind.STORAGE_FAILED, failure_message)

        changed = new_cart != self._cart
        self._cart = new_cart
        logger.info("Cart updated: %s (%d line(s))", action, len(new_cart))
        self._publish(new_cart)
        return CartResult.success(new_cart, changed=changed)

    def _publish(self, cart: Cart) -> None:
        for callback in list(self._subscribers):
            if self._cart is not cart:
                # A subscriber committed a newer cart, which was already published
                return
            try:
                callback(cart)
            except Exception:
                logger.exception("Cart subscriber %r failed", callback)

    async def aclose(self) -> None:
        """Close the catalog and stock clients that support it."""
        closed = []
        for service in (self.catalog, self.stock):
            if any(service is done for done in closed):
                continue
            closed.append(service)
            close = getattr(service, "aclose", None)
            if close is not None:
                await close()

    def _fail(self, kind: CartErrorKind, message: str, product_id: int | None = None) -> CartResult:
        logger.warning("Cart operation rejected: %s (product=%s)", kind.value, product_id)
        if self.notifier is not None:
            try:
                self.notifier.error(message)
            except Exception:
                logger.exception("Notification sink failed")
        return CartResult.failure(self._cart, kind, message)


def create_cart_store(
    settings: Settings | None = None,
    notifier: NotificationSink | None = None,
) -> CartStore:
    """Build a store wired to the configured shop API and storage back-end.

    Create one per session and pass it to the consumers that need it;
    `await store.aclose()` releases the HTTP client when the session ends.
    """
    settings = settings or load_settings()
    api = ShopApiClient(settings=settings)
    return CartStore(
        catalog=api,
        stock=api,
        storage=get_cart_storage(settings),
        notifier=notifier if notifier is not None else LoggingNotificationSink(),
    )
