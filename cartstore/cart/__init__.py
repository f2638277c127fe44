"""Cart package: models, storage, and the cart store."""
from .models import Cart, CartLine, cart_items_amount, cart_size, cart_total, dump_cart, load_cart
from .service import CartResult, CartStore, create_cart_store
from .storage import CartStorage, FileCartStorage, MemoryCartStorage, RedisCartStorage, get_cart_storage

__all__ = [
    "Cart",
    "CartLine",
    "cart_items_amount",
    "cart_size",
    "cart_total",
    "dump_cart",
    "load_cart",
    "CartResult",
    "CartStore",
    "create_cart_store",
    "CartStorage",
    "FileCartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "get_cart_storage",
]
