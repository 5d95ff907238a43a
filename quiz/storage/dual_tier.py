# quiz/storage/dual_tier.py - Volatile-first store backed by a durable tier

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from quiz.errors import StoreUnavailable
from quiz.models import CompletionRecord
from quiz.storage.durable import QuizDatabase
from quiz.storage.memory import MemoryCache
from quiz.storage.volatile import VolatileStore

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class DurableTier(ABC, Generic[K, V]):
    """Durable backing for one record kind"""

    @abstractmethod
    async def read(self, key: K) -> Optional[V]:
        pass

    @abstractmethod
    async def write(self, key: K, value: V, ttl: Optional[int]):
        pass

    @abstractmethod
    async def delete(self, key: K):
        pass

    @abstractmethod
    async def insert_if_absent(self, key: K, value: V, ttl: Optional[int]) -> bool:
        pass


class KeyValueTier(DurableTier[K, V]):
    """Stores JSON-encoded values in the kv_store table with an expiry"""

    def __init__(self, db: QuizDatabase, key_builder: Callable[[K], str],
                 encode: Callable[[V], Dict[str, Any]], decode: Callable[[Dict[str, Any]], V],
                 clock: Callable[[], float] = time.time):
        self.db = db
        self.key_builder = key_builder
        self.encode = encode
        self.decode = decode
        self.clock = clock

    def _expires_at(self, ttl: Optional[int]) -> Optional[float]:
        return self.clock() + ttl if ttl else None

    async def read(self, key: K) -> Optional[V]:
        raw = await self.db.kv_get(self.key_builder(key), self.clock())
        if raw is None:
            return None
        return self.decode(json.loads(raw))

    async def write(self, key: K, value: V, ttl: Optional[int]):
        await self.db.kv_set(self.key_builder(key), json.dumps(self.encode(value)), self._expires_at(ttl))

    async def delete(self, key: K):
        await self.db.kv_delete(self.key_builder(key))

    async def insert_if_absent(self, key: K, value: V, ttl: Optional[int]) -> bool:
        return await self.db.kv_insert_if_absent(
            self.key_builder(key), json.dumps(self.encode(value)), self._expires_at(ttl), self.clock()
        )


class CompletionTier(DurableTier[tuple, CompletionRecord]):
    """Completion records live in their own table and never expire by TTL"""

    def __init__(self, db: QuizDatabase):
        self.db = db

    async def read(self, key):
        return await self.db.get_completion(*key)

    async def write(self, key, value, ttl):
        await self.db.upsert_completion(value)

    async def delete(self, key):
        await self.db.delete_completion(*key)

    async def insert_if_absent(self, key, value, ttl) -> bool:
        return await self.db.insert_completion_if_absent(value)


class DualTierStore(Generic[K, V]):
    """Read-through store: memory layer, then Redis, then the durable tier.

    Writes land in Redis first (best-effort) and then in the durable tier.
    When durability is required, durable failures propagate as
    StoreUnavailable; otherwise they are logged and the call carries on.
    A durable hit is returned as-is and never copied back into Redis.
    """

    def __init__(
        self,
        name: str,
        key_builder: Callable[[K], str],
        encode: Callable[[V], Dict[str, Any]],
        decode: Callable[[Dict[str, Any]], V],
        volatile: VolatileStore,
        durable: DurableTier[K, V],
        default_ttl: Optional[int] = None,
        durable_required: bool = False,
        memory: Optional[MemoryCache] = None,
    ):
        self.name = name
        self.key_builder = key_builder
        self.encode = encode
        self.decode = decode
        self.volatile = volatile
        self.durable = durable
        self.default_ttl = default_ttl
        self.durable_required = durable_required
        self.memory = memory

    async def write(self, key: K, value: V, ttl: Optional[int] = None):
        ttl = ttl or self.default_ttl
        storage_key = self.key_builder(key)
        encoded = self.encode(value)

        await self._volatile_set(storage_key, encoded, ttl)

        try:
            await self.durable.write(key, value, ttl)
        except StoreUnavailable as e:
            self._durable_failed("write", storage_key, e)

        if self.memory is not None:
            self.memory.set(storage_key, encoded, ttl)

    async def read(self, key: K) -> Optional[V]:
        storage_key = self.key_builder(key)

        if self.memory is not None:
            cached = self.memory.get(storage_key)
            if cached is not None:
                return self.decode(cached)

        if self.volatile.available:
            try:
                cached = await self.volatile.get_json(storage_key)
            except StoreUnavailable as e:
                logger.warning(f"[{self.name}] volatile read failed for {storage_key}: {e}")
                cached = None
            if cached is not None:
                return self.decode(cached)

        try:
            return await self.durable.read(key)
        except StoreUnavailable as e:
            self._durable_failed("read", storage_key, e)
            return None

    async def delete(self, key: K):
        storage_key = self.key_builder(key)
        if self.memory is not None:
            self.memory.delete(storage_key)

        if self.volatile.available:
            try:
                await self.volatile.delete(storage_key)
            except StoreUnavailable as e:
                logger.warning(f"[{self.name}] volatile delete failed for {storage_key}: {e}")

        try:
            await self.durable.delete(key)
        except StoreUnavailable as e:
            self._durable_failed("delete", storage_key, e)

    async def insert_if_absent(self, key: K, value: V, ttl: Optional[int] = None) -> bool:
        """Atomically create the record unless a live one exists.

        The durable tier decides. If it is down and durability is optional,
        Redis SET NX decides instead; with both tiers down the insert is
        allowed and the in-process caller remains the only guard.
        """
        ttl = ttl or self.default_ttl
        storage_key = self.key_builder(key)
        encoded = self.encode(value)

        try:
            inserted = await self.durable.insert_if_absent(key, value, ttl)
        except StoreUnavailable as e:
            self._durable_failed("insert", storage_key, e)
            inserted = await self._volatile_set(storage_key, encoded, ttl, nx=True)
            if inserted is None:
                logger.warning(f"[{self.name}] no tier available to guard {storage_key}")
                inserted = True
        else:
            if inserted:
                await self._volatile_set(storage_key, encoded, ttl)

        if inserted and self.memory is not None:
            self.memory.set(storage_key, encoded, ttl)
        return inserted

    async def _volatile_set(self, storage_key: str, encoded: Dict[str, Any],
                            ttl: Optional[int], nx: bool = False) -> Optional[bool]:
        """Best-effort Redis write; None means Redis could not be used"""
        if not self.volatile.available:
            return None
        try:
            return await self.volatile.set_json(storage_key, encoded, ttl, nx=nx)
        except StoreUnavailable as e:
            logger.warning(f"[{self.name}] volatile write failed for {storage_key}: {e}")
            return None

    def _durable_failed(self, operation: str, storage_key: str, error: StoreUnavailable):
        if self.durable_required:
            raise error
        logger.warning(f"[{self.name}] durable {operation} failed for {storage_key}: {error}")
