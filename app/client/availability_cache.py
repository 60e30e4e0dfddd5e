"""
Per-session availability cache.

One cache belongs to one plot-viewing session: it is created with the
session, cleared on every local mutation and dropped when the session ends.
Entries are keyed by (plot_id, year, month) and expire TTL seconds after
they were fetched; an expired entry is never served.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass
class CacheEntry:
    bookings: List
    blocked_dates: List
    fetched_at: float
    plot: Optional[Dict] = field(default=None)


class AvailabilityCache:
    """TTL cache of availability windows, keyed per plot per month"""

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[Tuple[int, int, int], CacheEntry] = {}

    def __len__(self):
        return len(self._entries)

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.fetched_at < self.ttl

    def get(self, plot_id: int, year: int, month: int) -> Optional[CacheEntry]:
        """Return a fresh entry, or None on a miss or an expired entry"""
        key = (plot_id, year, month)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self.is_fresh(entry):
            logger.debug('Availability cache entry %s expired', key)
            del self._entries[key]
            return None
        return entry

    def set(self, plot_id: int, year: int, month: int, entry: CacheEntry) -> None:
        self._entries[(plot_id, year, month)] = entry

    def new_entry(self, bookings, blocked_dates, plot=None) -> CacheEntry:
        """Build an entry stamped with the cache's own clock"""
        return CacheEntry(bookings=bookings, blocked_dates=blocked_dates,
                          fetched_at=self.clock(), plot=plot)

    def invalidate_all(self) -> None:
        if self._entries:
            logger.debug('Invalidating %d availability cache entries', len(self._entries))
        self._entries.clear()
