"""
Cart error kinds, exceptions and user-facing messages.

Messages are centralized so the store and its consumers never disagree
on the wording shown to the user.
"""

from enum import Enum

# User-facing messages
ERROR_OUT_OF_STOCK = "requested quantity out of stock"
ERROR_ADDING_PRODUCT = "error adding product"
ERROR_REMOVING_PRODUCT = "error removing product"
ERROR_CHANGING_AMOUNT = "error changing product quantity"


class CartErrorKind(str, Enum):
    """Why a cart operation was rejected."""

    OUT_OF_STOCK = "out_of_stock"
    PRODUCT_NOT_FOUND = "product_not_found"
    CATALOG_LOOKUP_FAILED = "catalog_lookup_failed"
    STOCK_LOOKUP_FAILED = "stock_lookup_failed"
    STORAGE_FAILED = "storage_failed"
    CART_CHANGED = "cart_changed"


class CartError(Exception):
    """Base class for errors raised by cart collaborators."""

    kind: CartErrorKind | None = None


class LookupFailed(CartError):
    """A product or stock record could not be fetched."""

    def __init__(self, product_id: int, reason: str = "") -> None:
        self.product_id = product_id
        self.reason = reason
        message = f"lookup failed for product {product_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CatalogLookupFailed(LookupFailed):
    """Unknown product id, bad payload or transport failure on products/{id}."""

    kind = CartErrorKind.CATALOG_LOOKUP_FAILED


class StockLookupFailed(LookupFailed):
    """Unknown product id, bad payload or transport failure on stock/{id}."""

    kind = CartErrorKind.STOCK_LOOKUP_FAILED


class StorageError(CartError):
    """The persistent store could not read or write the cart slot."""

    kind = CartErrorKind.STORAGE_FAILED


__all__ = [
    "ERROR_OUT_OF_STOCK",
    "ERROR_ADDING_PRODUCT",
    "ERROR_REMOVING_PRODUCT",
    "ERROR_CHANGING_AMOUNT",
    "CartErrorKind",
    "CartError",
    "LookupFailed",
    "CatalogLookupFailed",
    "StockLookupFailed",
    "StorageError",
]
