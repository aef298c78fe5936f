# cartstore/context.py
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from cartstore.services.cart_store import CartStore

#aktualnie podpiety koszyk dla biezacego kontekstu (task / watek)
_current_cart: ContextVar[CartStore | None] = ContextVar("_current_cart", default=None)


class CartContextError(RuntimeError):
    """Dostep do koszyka poza provide_cart."""


@contextmanager
def provide_cart(store: CartStore) -> Iterator[CartStore]:
    token = _current_cart.set(store)
    try:
        yield store
    finally:
        _current_cart.reset(token)


def use_cart() -> CartStore:
    store = _current_cart.get()
    if store is None:
        raise CartContextError("use_cart must be used within provide_cart")
    return store
