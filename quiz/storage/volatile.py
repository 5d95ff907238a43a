# quiz/storage/volatile.py - Redis-backed volatile tier

import asyncio
import json
import logging
from typing import Any, Iterable, Optional, Set

import redis.asyncio as redis
from redis.exceptions import RedisError

from quiz.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


class VolatileStore:
    """Thin async wrapper over Redis with a fixed key prefix.

    Every operation raises StoreUnavailable on failure; callers decide
    whether that is fatal. With no client configured the store reports
    itself unavailable and callers skip it.
    """

    def __init__(self, client: Optional[redis.Redis], prefix: str = "Quiz-Bot:"):
        self.client = client
        self.prefix = prefix

    @classmethod
    async def connect(cls, url: Optional[str], prefix: str = "Quiz-Bot:") -> "VolatileStore":
        """Connect to Redis, or return a disabled store when it can't be reached"""
        if not url:
            logger.info("No REDIS_URL configured, volatile tier disabled")
            return cls(None, prefix)

        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        try:
            await client.ping()
        except _CONNECTION_ERRORS as e:
            logger.warning(f"⚠️ Redis unreachable at startup ({e}), volatile tier disabled")
            await client.aclose()
            return cls(None, prefix)

        logger.info("✅ Connected to Redis volatile tier")
        return cls(client, prefix)

    @property
    def available(self) -> bool:
        return self.client is not None

    async def close(self):
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            logger.info("Closed Redis connection")

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _require_client(self) -> redis.Redis:
        if self.client is None:
            raise StoreUnavailable("volatile", "not connected")
        return self.client

    async def get_json(self, key: str) -> Optional[Any]:
        client = self._require_client()
        try:
            raw = await client.get(self._key(key))
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailable("volatile", str(e)) from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding unreadable volatile value at {key}")
            return None

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None, nx: bool = False) -> bool:
        client = self._require_client()
        try:
            result = await client.set(self._key(key), json.dumps(value), ex=ttl, nx=nx)
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailable("volatile", str(e)) from e
        return bool(result)

    async def delete(self, *keys: str) -> int:
        client = self._require_client()
        if not keys:
            return 0
        try:
            return await client.delete(*(self._key(k) for k in keys))
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailable("volatile", str(e)) from e

    async def exists(self, key: str) -> bool:
        client = self._require_client()
        try:
            return bool(await client.exists(self._key(key)))
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailable("volatile", str(e)) from e

    async def add_members(self, key: str, members: Iterable[str], ttl: Optional[int] = None):
        """Add members to a set and refresh its expiry"""
        client = self._require_client()
        members = list(members)
        if not members:
            return
        full_key = self._key(key)
        try:
            async with client.pipeline(transaction=True) as pipe:
                pipe.sadd(full_key, *members)
                if ttl:
                    pipe.expire(full_key, ttl)
                await pipe.execute()
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailable("volatile", str(e)) from e

    async def members(self, key: str) -> Set[str]:
        client = self._require_client()
        try:
            return set(await client.smembers(self._key(key)))
        except _CONNECTION_ERRORS as e:
            raise StoreUnavailable("volatile", str(e)) from e
