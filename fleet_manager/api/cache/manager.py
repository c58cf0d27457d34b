"""Per-process response cache for dashboard and health payloads."""
from __future__ import annotations

import copy
import fnmatch
import threading
import time
from typing import Any, Dict, NamedTuple, Optional

import fleet_manager.config as cfg

HEALTH_TTL = 10
FALLBACK_TTL = 60


class _Entry(NamedTuple):
    value: Any
    expires_at: float


def default_ttl(key: str) -> int:
    """TTL for a key from its namespace, read from the live config."""
    namespace, _, rest = key.partition(":")
    if namespace == "dashboard":
        return cfg.DASHBOARD_CHART_TTL if rest.startswith("chart:") else cfg.DASHBOARD_STATS_TTL
    if namespace == "health":
        return HEALTH_TTL
    return FALLBACK_TTL


class CacheManager:
    """Lock-protected TTL cache holding at most ``max_size`` entries.

    Keys look like ``dashboard:stats:<company_id>`` so a company's entries
    can be dropped with one glob.  Stored and returned values are deep
    copies; a caller mutating a payload never touches the cached one.
    """

    def __init__(self, max_size: int = 256) -> None:
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._max_size = max_size
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and time.monotonic() >= entry.expires_at:
                del self._entries[key]
                entry = None
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
            return copy.deepcopy(entry.value)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Cache *value* for *ttl* seconds (``default_ttl`` when omitted).

        A TTL of zero or less drops the key instead.
        """
        if ttl is None:
            ttl = default_ttl(key)
        with self._lock:
            if ttl <= 0:
                self._entries.pop(key, None)
                return
            self._entries[key] = _Entry(copy.deepcopy(value), time.monotonic() + ttl)
            if len(self._entries) > self._max_size:
                self._make_room()

    def invalidate_pattern(self, pattern: str) -> int:
        """Drop every key matching the glob *pattern*; returns how many went."""
        with self._lock:
            doomed = [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}

    def _make_room(self) -> None:
        # Called under the lock.  Expired entries go first, then the one
        # closest to expiry.
        now = time.monotonic()
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for k in expired:
            del self._entries[k]
        while len(self._entries) > self._max_size:
            soonest = min(self._entries, key=lambda k: self._entries[k].expires_at)
            del self._entries[soonest]
