"""
Per-user queue of freshly created products waiting to be claimed by a widget.

Stored in the TTL cache under `queue:<user_id>` as a JSON list of product ids.
Every write goes through `Cache.compare_and_set`, so two requests racing on the
same queue can never both take the same head entry or drop each other's
appends.
"""
import json
import logging
from typing import List, Optional

from infrastructure.cache import Cache

logger = logging.getLogger(__name__)

DEFAULT_TTL = 86400  # one day
DEFAULT_MAX_SWAP_ATTEMPTS = 10


class QueueContentionError(Exception):
    """Queue kept changing underneath us for every swap attempt."""

    def __init__(self, user_id: int, attempts: int):
        super().__init__(f"Queue for user {user_id} still contended after {attempts} attempts")
        self.user_id = user_id
        self.attempts = attempts


def queue_key(user_id: int) -> str:
    return f"queue:{user_id}"


def _decode(raw: Optional[str]) -> List[int]:
    if raw is None:
        return []
    entries = json.loads(raw)
    if not isinstance(entries, list):
        logger.warning("Discarding malformed queue value", extra={'raw_value': raw})
        return []
    return [int(entry) for entry in entries]


def _encode(entries: List[int]) -> str:
    return json.dumps(entries)


class ProductQueue:
    """
    FIFO of product ids per user.

    enqueue appends at the tail and resets the expiry to now + ttl.
    dequeue_head removes the head and writes back the rest with the same ttl.
    An absent queue and an empty one behave the same.
    """

    def __init__(
        self,
        cache: Cache,
        ttl: int = DEFAULT_TTL,
        max_swap_attempts: int = DEFAULT_MAX_SWAP_ATTEMPTS
    ):
        self._cache = cache
        self._ttl = ttl
        self._max_swap_attempts = max_swap_attempts

    @property
    def ttl(self) -> int:
        return self._ttl

    def enqueue(self, user_id: int, product_id: int) -> None:
        if isinstance(product_id, bool) or not isinstance(product_id, int) or product_id <= 0:
            raise ValueError(f"Product id must be a positive integer, got {product_id!r}")

        key = queue_key(user_id)
        for _ in range(self._max_swap_attempts):
            raw = self._cache.get(key)
            entries = _decode(raw)
            entries.append(product_id)
            if self._cache.compare_and_set(key, raw, _encode(entries), ttl=self._ttl):
                logger.info(
                    "Product queued for claiming",
                    extra={'user_id': user_id, 'product_id': product_id, 'queue_length': len(entries)}
                )
                return

        raise QueueContentionError(user_id, self._max_swap_attempts)

    def dequeue_head(self, user_id: int) -> Optional[int]:
        """Pop the oldest entry. Returns None (and writes nothing) when empty."""
        key = queue_key(user_id)
        for _ in range(self._max_swap_attempts):
            raw = self._cache.get(key)
            entries = _decode(raw)
            if not entries:
                return None

            head, rest = entries[0], entries[1:]
            if self._cache.compare_and_set(key, raw, _encode(rest), ttl=self._ttl):
                logger.info(
                    "Product taken from queue",
                    extra={'user_id': user_id, 'product_id': head, 'queue_length': len(rest)}
                )
                return head

            logger.debug("Queue changed during dequeue, retrying", extra={'user_id': user_id})

        raise QueueContentionError(user_id, self._max_swap_attempts)

    def pending(self, user_id: int) -> List[int]:
        """Current queue contents, oldest first."""
        return _decode(self._cache.get(queue_key(user_id)))

    def expires_in(self, user_id: int) -> int:
        """Seconds until the queue expires, 0 when there is none."""
        return self._cache.ttl(queue_key(user_id)) or 0
