# cartstore/__init__.py
from cartstore.context import CartContextError, provide_cart, use_cart
from cartstore.domain.schemas import LineItem, ProductRef
from cartstore.repos.cart_repo import (
    CartPersistence,
    MemoryCartPersistence,
    RedisCartPersistence,
    SnapshotError,
)
from cartstore.services.cart_store import CartItemNotFound, CartStore

__all__ = [
    "CartContextError",
    "CartItemNotFound",
    "CartPersistence",
    "CartStore",
    "LineItem",
    "MemoryCartPersistence",
    "ProductRef",
    "RedisCartPersistence",
    "SnapshotError",
    "provide_cart",
    "use_cart",
]
