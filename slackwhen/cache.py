"""Short-lived memo of Slack messages keyed by channel and timestamp.

Entries expire after a fixed TTL. They are evicted when read, and writes
sweep out anything expired at most once per TTL. The cache only ever
shortens the lookup path: anything it returns could be fetched again
from Slack.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger("slackwhen.cache")

DEFAULT_TTL = 30.0


@dataclass
class CacheEntry:
    message: dict
    cached_at: float


class MessageCache:
    """Thread-safe TTL cache of Slack messages.

    Keys are ``"<channel>:<ts>"``. ``ts`` may be a Slack message ts
    (``"1704033000.000100"``) or the whole-second epoch a lookup was made
    for; both live in the same namespace.

    Default TTL: 30 seconds.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            ttl: Seconds an entry stays valid after it was written
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @staticmethod
    def key(channel: str, ts) -> str:
        return f"{channel}:{ts}"

    def get(self, channel: str, ts) -> Optional[dict]:
        """Return the cached message, or None if missing or expired.

        An expired entry is removed as part of the read.
        """
        key = self.key(channel, ts)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.cached_at >= self.ttl:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            return entry.message

    def put(self, channel: str, ts, message: dict):
        """Store a message, overwriting any entry and resetting its age.

        At most once per TTL, expired entries under any key are dropped too,
        so keys that are written but never read again cannot pile up.
        """
        key = self.key(channel, ts)
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.ttl:
                self._sweep(now)
            self._entries[key] = CacheEntry(message=message, cached_at=now)

    def _sweep(self, now: float):
        # Caller holds the lock
        expired = [k for k, e in self._entries.items() if now - e.cached_at >= self.ttl]
        for k in expired:
            del self._entries[k]
        self._last_sweep = now
        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")

    def _keys_for_message(self, channel: str, message_ts: str) -> list[str]:
        # Caller holds the lock
        prefix = f"{channel}:"
        return [
            k for k, e in self._entries.items()
            if k.startswith(prefix) and e.message.get("ts") == message_ts
        ]

    def replace_message(self, channel: str, message_ts: str, message: dict) -> int:
        """Rewrite every entry in ``channel`` that holds the message ``message_ts``.

        Entries keep their age. Returns how many were rewritten.
        """
        with self._lock:
            keys = self._keys_for_message(channel, message_ts)
            for k in keys:
                self._entries[k].message = message
            return len(keys)

    def discard_message(self, channel: str, message_ts: str) -> int:
        """Drop every entry in ``channel`` that holds the message ``message_ts``,
        plus the entry keyed by ``message_ts`` itself. Returns how many went.
        """
        with self._lock:
            keys = set(self._keys_for_message(channel, message_ts))
            keys.add(self.key(channel, message_ts))
            removed = 0
            for k in keys:
                if self._entries.pop(k, None) is not None:
                    removed += 1
            return removed

    def remove(self, channel: str, ts):
        """Drop an entry. Removing a missing key is a no-op."""
        with self._lock:
            self._entries.pop(self.key(channel, ts), None)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
