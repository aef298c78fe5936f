# cartstore/services/cart_store.py
import asyncio
from typing import Any, Callable, Mapping

from cartstore.domain.schemas import LineItem, ProductRef
from cartstore.repos.cart_repo import CartPersistence, SnapshotError, dump_snapshot, load_snapshot
from cartstore.utils.settings import CART_STORAGE_KEY
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)

Subscriber = Callable[[tuple[LineItem, ...]], Any]


class CartItemNotFound(LookupError):
    def __init__(self, item_id: str):
        super().__init__(f"Produkt {item_id} nie istnieje w koszyku")
        self.item_id = item_id


class CartStore:
    """
    Koszyk trzymany w pamieci, jedyny wlasciciel listy pozycji.

    commands (add_to_cart, increment, decrement) synchronicznie licza nowy stan
    z aktualnego stanu, potem w tle zapisuja pelny snapshot
    query (products) tylko odczyt

    Przy tworzeniu w tle odczytuje ostatni snapshot (jednorazowo).
    Bledy magazynu nigdy nie wychodza do wywolujacego - logujemy i jedziemy dalej.
    """

    def __init__(self, persistence: CartPersistence, storage_key: str | None = None):
        #wymaga dzialajacej petli asyncio, bez niej RuntimeError od razu
        self._loop = asyncio.get_running_loop()

        self.persistence = persistence
        self.storage_key = storage_key or CART_STORAGE_KEY

        self._items: tuple[LineItem, ...] = ()
        self._subscribers: list[Subscriber] = []
        self._tasks: set[asyncio.Task] = set()
        self._save_lock = asyncio.Lock()
        self._loaded = False
        self._dirty = False
        self._closed = False

        self._load_task = self._spawn(self._load())

    # =====================================================
    # QUERY
    # =====================================================
    @property
    def products(self) -> tuple[LineItem, ...]:
        return self._items

    @property
    def loaded(self) -> bool:
        return self._loaded

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_to_cart(self, product: ProductRef | Mapping[str, Any]) -> None:
        """
        Nowy produkt -> dopisany na koniec z quantity 1.
        Produkt juz w koszyku -> quantity + 1, pozycja bez zmian.
        """
        self._ensure_open()

        if not isinstance(product, ProductRef):
            product = ProductRef.model_validate(product)

        items = self._items
        index = _index_of(items, product.id)

        if index is None:
            logger.info(f"Dodaje nowy produkt {product.id} do koszyka")
            next_items = items + (LineItem.from_product(product),)
        else:
            logger.info(f"Produkt {product.id} juz jest w koszyku, zwiekszam ilosc")
            next_items = _with_quantity(items, index, items[index].quantity + 1)

        self._apply(next_items)

    def increment(self, item_id: str) -> None:
        self._ensure_open()

        items = self._items
        index = _index_of(items, item_id)
        if index is None:
            raise CartItemNotFound(item_id)

        logger.info(f"Zwiekszam ilosc produktu {item_id}")
        self._apply(_with_quantity(items, index, items[index].quantity + 1))

    def decrement(self, item_id: str) -> None:
        """Przy quantity < 1 pozycja znika z koszyka."""
        self._ensure_open()

        items = self._items
        index = _index_of(items, item_id)
        if index is None:
            raise CartItemNotFound(item_id)

        logger.info(f"Zmniejszam ilosc produktu {item_id}")
        self._apply(_with_quantity(items, index, items[index].quantity - 1))

    # =====================================================
    # SUBSCRIPTIONS
    # =====================================================
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # =====================================================
    # LIFECYCLE
    # =====================================================
    async def wait_loaded(self) -> None:
        await asyncio.shield(self._load_task)

    async def flush(self) -> None:
        """Czeka na wszystkie zadania w tle (odczyt i zapisy)."""
        while self._tasks:
            await asyncio.gather(*self._tasks)

    async def aclose(self) -> None:
        self._closed = True
        await self.flush()
        logger.info(f"Koszyk {self.storage_key} zamkniety")

    # =====================================================
    # INTERNALS
    # =====================================================
    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Koszyk zostal zamkniety")

    def _apply(self, next_items: tuple[LineItem, ...]) -> None:
        self._dirty = True
        self._commit(next_items)
        #snapshot liczony teraz, nie w momencie wykonania zadania
        snapshot = dump_snapshot(next_items)
        self._spawn(self._save(snapshot))

    def _commit(self, next_items: tuple[LineItem, ...]) -> None:
        self._items = next_items

        for callback in list(self._subscribers):
            try:
                callback(next_items)
            except Exception:
                logger.exception(f"Subskrybent {callback!r} rzucil wyjatek")

    def _spawn(self, coro) -> asyncio.Task:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _load(self) -> None:
        try:
            items = await self._read_snapshot()
            if items is not None:
                self._commit(tuple(items))
                logger.info(f"Wczytano {len(items)} pozycji z {self.storage_key}")
                #zmiany sprzed odczytu nadpisaly snapshot, zapisujemy wczytany stan ponownie
                if self._dirty:
                    self._spawn(self._save(dump_snapshot(self._items)))
        finally:
            self._loaded = True

    async def _read_snapshot(self) -> list[LineItem] | None:
        try:
            raw = await self.persistence.load(self.storage_key)
        except Exception as e:
            logger.warning(f"Nie udalo sie odczytac koszyka {self.storage_key}: {e}")
            return None

        if raw is None:
            logger.info(f"Brak zapisanego koszyka pod {self.storage_key}")
            return None

        try:
            return load_snapshot(raw)
        except SnapshotError as e:
            logger.warning(f"Uszkodzony snapshot {self.storage_key}, start z pustym koszykiem: {e}")
            return None

    async def _save(self, snapshot: str) -> None:
        #lock jest FIFO - ostatni zapis to zawsze ostatni stan
        async with self._save_lock:
            try:
                await self.persistence.save(self.storage_key, snapshot)
            except Exception as e:
                logger.warning(f"Nie udalo sie zapisac koszyka {self.storage_key}: {e}")


def _index_of(items: tuple[LineItem, ...], item_id: str) -> int | None:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return None


def _with_quantity(items: tuple[LineItem, ...], index: int, quantity: int) -> tuple[LineItem, ...]:
    if quantity < 1:
        return items[:index] + items[index + 1:]

    updated = items[index].model_copy(update={"quantity": quantity})
    return items[:index] + (updated,) + items[index + 1:]
