import json
import logging
from typing import Any, Callable, Optional

import redis
import redis.exceptions

from tinylink.core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """Cache tier used for the allocation counter and link lookups.

    Values are JSON encoded unless ``raw=True``, in which case they are stored
    as plain strings so Redis can INCR them. Any Redis failure is raised as
    CacheUnavailableError; callers decide whether to fail open.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    def exists(self, key: str) -> bool:
        try:
            return bool(self.client.exists(key))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"Redis EXISTS {key} failed: {e}") from e

    def read(self, key: str, raw: bool = False) -> Any:
        try:
            value = self.client.get(key)
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"Redis GET {key} failed: {e}") from e
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            value = value.decode()
        return value if raw else json.loads(value)

    def write(
        self,
        key: str,
        value: Any,
        raw: bool = False,
        expires_in: Optional[int] = None,
        unless_exist: bool = False,
    ) -> bool:
        """Store ``value``. With ``unless_exist`` this is SET NX and returns
        False when the key was already present."""
        payload = str(value) if raw else json.dumps(value, default=str)
        try:
            written = self.client.set(key, payload, ex=expires_in, nx=unless_exist)
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"Redis SET {key} failed: {e}") from e
        return bool(written)

    def increment(self, key: str, amount: int = 1, expires_in: Optional[int] = None) -> int:
        """INCR ``key``. With ``expires_in`` the TTL is sent in the same
        MULTI/EXEC as the increment and only set when the key has none."""
        try:
            if not expires_in:
                return int(self.client.incr(key, amount))
            pipe = self.client.pipeline(transaction=True)
            pipe.incr(key, amount)
            pipe.expire(key, expires_in, nx=True)
            value, _ = pipe.execute()
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"Redis INCR {key} failed: {e}") from e
        return int(value)

    def fetch(self, key: str, expires_in: Optional[int], compute: Callable[[], Any]) -> Any:
        """Cache-aside read: return the cached value or compute, store and
        return it. Exceptions from ``compute`` propagate and nothing is stored.
        An entry that is not valid JSON is dropped and treated as a miss."""
        try:
            cached = self.read(key)
        except ValueError:
            logger.warning("Discarding unreadable cache entry %s", key)
            self.delete(key)
            cached = None
        if cached is not None:
            logger.debug("Cache HIT for %s", key)
            return cached

        logger.debug("Cache MISS for %s", key)
        value = compute()
        if value is not None:
            self.write(key, value, expires_in=expires_in)
        return value

    def delete(self, key: str) -> bool:
        try:
            return bool(self.client.delete(key))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"Redis DEL {key} failed: {e}") from e

    def clear(self) -> None:
        try:
            self.client.flushdb()
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"Redis FLUSHDB failed: {e}") from e
        logger.warning("Cache cleared")

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.exceptions.RedisError:
            return False
