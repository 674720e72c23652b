from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Mapping, Optional, TypeVar

from ..core.constants import DEFAULT_CACHE_TTL_SECONDS

T = TypeVar("T")

BY_LEADER = "byLeader"
BY_DATE_RANGE = "byDateRange"
JUSTIFICATIONS = "justifications"


@dataclass
class _Entry:
    value: Any
    expires_at: float


class ReadThroughCache:
    """TTL read-through cache grouped by invalidation key families.

    Entries live under ``(family, key)``; ``invalidate(family)`` drops every
    entry in a family.  The clock is injectable so tests can move time.
    """

    def __init__(
        self,
        ttl_seconds: Optional[Mapping[str, float]] = None,
        *,
        default_ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = dict(DEFAULT_CACHE_TTL_SECONDS)
        self._ttl.update(ttl_seconds or {})
        self._default_ttl = float(default_ttl)
        self._clock = clock
        self._entries: dict[tuple[str, Hashable], _Entry] = {}
        self._lock = threading.Lock()

    def ttl_for(self, family: str) -> float:
        return float(self._ttl.get(family, self._default_ttl))

    def get_or_load(self, family: str, key: Hashable, loader: Callable[[], T]) -> T:
        now = self._clock()
        with self._lock:
            entry = self._entries.get((family, key))
            if entry is not None and now < entry.expires_at:
                return entry.value

        value = loader()
        ttl = self.ttl_for(family)
        if ttl > 0:
            with self._lock:
                self._entries[(family, key)] = _Entry(value=value, expires_at=self._clock() + ttl)
        return value

    def invalidate(self, family: Optional[str] = None) -> None:
        with self._lock:
            if family is None:
                self._entries.clear()
                return
            for k in [k for k in self._entries if k[0] == family]:
                del self._entries[k]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
