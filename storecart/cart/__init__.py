"""Cart package: models, storage, and manager."""
from .models import CartItem, Cart
from .service import CartManager, close_cart_manager, get_cart_manager
from .storage import CartStorage, MemoryCartStorage, RedisCartStorage

__all__ = [
    "CartItem",
    "Cart",
    "CartManager",
    "get_cart_manager",
    "close_cart_manager",
    "CartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
]
