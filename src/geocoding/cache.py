"""In-memory reverse-geocode cache with fuzzy lookup and popularity eviction.

Entries are keyed by the exact (latitude, longitude) pair. Lookups can fall
back to the nearest entry within a tolerance. Callers only ever receive deep
copies of the cached addresses.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace

from domain.models import Address, Coordinate
from geo.distance import great_circle_m
from shared.constants import (
    GEOCODE_CACHE_KEEP,
    GEOCODE_CACHE_LIMIT,
    GEOCODE_TTL_DAYS,
    SECONDS_PER_DAY,
)

logger = logging.getLogger(__name__)


@dataclass
class GeocodeCacheEntry:
    """Cached address with its bookkeeping."""

    coordinate: Coordinate
    address: Address
    timestamp: float
    ref_count: int


class GeocodeCache:
    """Thread-safe coordinate -> address store.

    One lock guards every read and write and is held for whole scan and
    eviction passes.

    Usage:
        cache = GeocodeCache()
        cache.insert(Coordinate(60.17, 24.94), address)
        hit = cache.lookup(Coordinate(60.1701, 24.9401), tolerance_m=50)
    """

    def __init__(
        self,
        *,
        limit: int = GEOCODE_CACHE_LIMIT,
        keep: int = GEOCODE_CACHE_KEEP,
        ttl_days: int = GEOCODE_TTL_DAYS,
    ) -> None:
        self.limit = limit
        self.keep = keep
        self.ttl_s = ttl_days * SECONDS_PER_DAY
        self._entries: dict[tuple[float, float], GeocodeCacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(coordinate: Coordinate) -> tuple[float, float]:
        return (float(coordinate.latitude), float(coordinate.longitude))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, coordinate: Coordinate) -> bool:
        with self._lock:
            return self._key(coordinate) in self._entries

    def lookup(self, coordinate: Coordinate, tolerance_m: float = 0.0) -> Address | None:
        """
        Find the address cached for a coordinate.

        Exact match first; otherwise, when tolerance_m > 0, the entry with the
        smallest great-circle distance not exceeding tolerance_m. A hit bumps
        the entry's reference count.

        Returns:
            Deep copy of the cached address, or None on a miss.
        """
        with self._lock:
            entry = self._entries.get(self._key(coordinate))
            if entry is None and tolerance_m > 0:
                entry = self._nearest(coordinate, tolerance_m)
            if entry is None:
                return None
            entry.ref_count += 1
            return entry.address.model_copy(deep=True)

    def _nearest(self, coordinate: Coordinate, tolerance_m: float) -> GeocodeCacheEntry | None:
        best: GeocodeCacheEntry | None = None
        best_distance = 0.0
        for entry in self._entries.values():
            distance = great_circle_m(
                coordinate.latitude,
                coordinate.longitude,
                entry.coordinate.latitude,
                entry.coordinate.longitude,
            )
            if distance > tolerance_m:
                continue
            if best is None or distance < best_distance:
                best = entry
                best_distance = distance
        return best

    def peek(self, coordinate: Coordinate) -> GeocodeCacheEntry | None:
        """Copy of the exact entry without touching its reference count."""
        with self._lock:
            entry = self._entries.get(self._key(coordinate))
            if entry is None:
                return None
            return replace(entry, address=entry.address.model_copy(deep=True))

    def insert(
        self,
        coordinate: Coordinate,
        address: Address,
        *,
        timestamp: float | None = None,
        ref_count: int = 1,
    ) -> None:
        """Store an address, replacing any entry for the same coordinate."""
        entry = GeocodeCacheEntry(
            coordinate=coordinate,
            address=address.model_copy(deep=True),
            timestamp=time.time() if timestamp is None else timestamp,
            ref_count=ref_count,
        )
        with self._lock:
            self._entries[self._key(coordinate)] = entry

    def evict_if_needed(self, now: float | None = None) -> int:
        """
        Shrink the cache once it holds more than `limit` entries.

        Entries older than the TTL go first, unconditionally. The survivors
        are ranked by reference count, then timestamp (both descending), and
        only the best `keep` are retained.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            total = len(self._entries)
            if total <= self.limit:
                return 0
            cutoff = (time.time() if now is None else now) - self.ttl_s
            survivors = [e for e in self._entries.values() if e.timestamp >= cutoff]
            expired = total - len(survivors)
            survivors.sort(key=lambda e: (e.ref_count, e.timestamp), reverse=True)
            kept = survivors[: self.keep]
            self._entries = {self._key(e.coordinate): e for e in kept}
            removed = total - len(kept)

        logger.info(
            'Geocode cache eviction: %d removed (%d expired), %d kept',
            removed,
            expired,
            len(kept),
        )
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
