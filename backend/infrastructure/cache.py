"""
TTL-aware key-value store.

Holds short-lived state such as the per-user product claim queues.
Values are strings; callers serialize their own payloads.
"""
from abc import ABC, abstractmethod
from typing import Optional
import threading

from infrastructure.clock import Clock, SystemClock


class Cache(ABC):
    """Abstract cache interface."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get value by key. Returns None if not found or expired."""
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: int = 3600) -> None:
        """Set value with TTL in seconds."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete key."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if key exists."""
        pass

    @abstractmethod
    def compare_and_set(
        self,
        key: str,
        expected: Optional[str],
        value: str,
        ttl: int = 3600
    ) -> bool:
        """
        Atomically replace the value of `key` if it still equals `expected`.

        `expected=None` means the key must be absent (or expired).
        On success the new value is stored with a fresh TTL and True is
        returned. If another writer got there first nothing is written and
        False is returned.
        """
        pass

    @abstractmethod
    def ttl(self, key: str) -> Optional[int]:
        """Seconds until `key` expires, None if absent or without expiry."""
        pass


# KEYS[1] = key; ARGV = expect_absent flag, expected value, new value, ttl
_COMPARE_AND_SET_SCRIPT = """
local current = redis.call('GET', KEYS[1])
if ARGV[1] == '1' then
    if current then
        return 0
    end
elseif current ~= ARGV[2] then
    return 0
end
redis.call('SET', KEYS[1], ARGV[3], 'EX', tonumber(ARGV[4]))
return 1
"""


class RedisCache(Cache):
    """Redis cache implementation."""

    def __init__(self, redis_url: str):
        import redis
        self._client = redis.from_url(redis_url, decode_responses=True)
        self._compare_and_set = self._client.register_script(_COMPARE_AND_SET_SCRIPT)

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, value: str, ttl: int = 3600) -> None:
        self._client.setex(key, ttl, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def exists(self, key: str) -> bool:
        return bool(self._client.exists(key))

    def compare_and_set(
        self,
        key: str,
        expected: Optional[str],
        value: str,
        ttl: int = 3600
    ) -> bool:
        expect_absent = '1' if expected is None else '0'
        swapped = self._compare_and_set(
            keys=[key],
            args=[expect_absent, expected or '', value, ttl]
        )
        return bool(swapped)

    def ttl(self, key: str) -> Optional[int]:
        # -2: no such key, -1: no expiry
        remaining = self._client.ttl(key)
        return remaining if remaining >= 0 else None

    def close(self) -> None:
        self._client.close()


class FakeCache(Cache):
    """
    In-memory cache for testing.
    Expiry follows the injected clock, so a FakeClock drives TTL behaviour.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._store: dict[str, tuple[str, int]] = {}  # key -> (value, expiry_unix)
        self._lock = threading.Lock()
        self.writes = 0

    def _read(self, key: str) -> Optional[str]:
        if key not in self._store:
            return None

        value, expiry = self._store[key]
        if expiry > 0 and self._clock.now_unix() >= expiry:
            del self._store[key]
            return None

        return value

    def _write(self, key: str, value: str, ttl: int) -> None:
        expiry = self._clock.now_unix() + ttl if ttl > 0 else 0
        self._store[key] = (value, expiry)
        self.writes += 1

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read(key)

    def set(self, key: str, value: str, ttl: int = 3600) -> None:
        with self._lock:
            self._write(key, value, ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    def compare_and_set(
        self,
        key: str,
        expected: Optional[str],
        value: str,
        ttl: int = 3600
    ) -> bool:
        with self._lock:
            if self._read(key) != expected:
                return False
            self._write(key, value, ttl)
            return True

    def ttl(self, key: str) -> Optional[int]:
        """Seconds until `key` expires, None if absent or without expiry."""
        with self._lock:
            if self._read(key) is None:
                return None
            expiry = self._store[key][1]
            return expiry - self._clock.now_unix() if expiry > 0 else None

    def clear(self) -> None:
        """Clear all keys (for test cleanup)."""
        with self._lock:
            self._store.clear()
