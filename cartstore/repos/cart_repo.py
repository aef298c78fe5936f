# cartstore/repos/cart_repo.py
import json
from abc import ABC, abstractmethod
from typing import Iterable

import redis.asyncio as redis
from pydantic import TypeAdapter, ValidationError

from cartstore.domain.schemas import LineItem
from cartstore.utils.retry import redis_retry
from cartstore.utils.settings import REDIS_URL
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)

_LINE_ITEMS = TypeAdapter(list[LineItem])


class SnapshotError(ValueError):
    """Zapisany snapshot koszyka nie daje sie odczytac."""


def dump_snapshot(items: Iterable[LineItem]) -> str:
    #tablica json {id, title, imageUrl, unitPrice, quantity} w kolejnosci koszyka
    return json.dumps([item.model_dump(by_alias=True) for item in items])


def load_snapshot(raw: str) -> list[LineItem]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise SnapshotError(f"Niepoprawny JSON snapshotu: {e}") from e

    if not isinstance(data, list):
        raise SnapshotError(f"Snapshot musi byc tablica, jest {type(data).__name__}")

    try:
        items = _LINE_ITEMS.validate_python(data)
    except ValidationError as e:
        raise SnapshotError(f"Niepoprawna pozycja w snapshocie: {e}") from e

    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        raise SnapshotError("Zduplikowane id w snapshocie")

    return items


class CartPersistence(ABC):
    """
    Magazyn klucz -> string dla snapshotu koszyka.
    load i save moga rzucic wyjatek, CartStore traktuje to jako brak danych / pomija zapis
    """

    @abstractmethod
    async def load(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def save(self, key: str, value: str) -> None:
        ...


class RedisCartPersistence(CartPersistence):
    """
    -GET / SET pod jednym kluczem
    -SET nadpisuje caly snapshot (last write wins)
    -retry tenacity na RedisError
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    async def load(self, key: str) -> str | None:
        logger.info(f"Load snapshot {key}")
        return await self.redis.get(key)

    @redis_retry()
    async def save(self, key: str, value: str) -> None:
        logger.info(f"Save snapshot {key} ({len(value)} chars)")
        await self.redis.set(key, value)

    async def aclose(self) -> None:
        await self.redis.aclose()


class MemoryCartPersistence(CartPersistence):
    """Wersja w pamieci procesu, do testow i lokalnego uruchamiania."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.saves = 0

    async def load(self, key: str) -> str | None:
        return self.data.get(key)

    async def save(self, key: str, value: str) -> None:
        self.data[key] = value
        self.saves += 1
