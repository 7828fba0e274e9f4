"""On-disk map tile cache.

Tiles are stored as individual PNG files named after zoom/x/y/style with
fixed-width zero-padded fields. A file is fresh while its modification time
is within the TTL; stale, missing or undecodable files are cache misses.

A recency index of every cached file is kept in memory. Nothing prunes it or
the files behind it: the cache grows without bound.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from shared.constants import SECONDS_PER_DAY, TILE_TTL_DAYS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileKey:
    """Cache key; style_bits must already be canonical."""

    zoom: int
    x: int
    y: int
    style_bits: int

    @property
    def filename(self) -> str:
        return f'{self.zoom:02d}{self.x:06d}{self.y:06d}{self.style_bits:02d}.png'


@dataclass
class TileListEntry:
    """Recency index entry."""

    path: Path
    timestamp: float


class TileCache:
    """File-per-tile cache with freshness checking.

    Usage:
        cache = TileCache('/path/to/cache')
        cache.scan()
        img = cache.load(key)            # None on miss
        if img is None:
            img = fetch(...)
            cache.store(key, img)
    """

    def __init__(self, cache_dir: str | Path, *, ttl_days: int = TILE_TTL_DAYS) -> None:
        self.cache_dir = Path(cache_dir)
        self.ttl_s = ttl_days * SECONDS_PER_DAY
        self._index: OrderedDict[Path, TileListEntry] = OrderedDict()
        self._lock = threading.Lock()
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(
                'Map tile cache directory does not exist and could not create it. '
                'Cache directory: %s (%s)',
                self.cache_dir,
                e,
            )
        logger.info('TileCache initialized at %s', self.cache_dir)

    def path_for(self, key: TileKey) -> Path:
        return self.cache_dir / key.filename

    def is_fresh(self, key: TileKey, now: float | None = None) -> bool:
        """True when the tile file exists and is younger than the TTL."""
        try:
            mtime = self.path_for(key).stat().st_mtime
        except OSError:
            return False
        now = time.time() if now is None else now
        return mtime > now - self.ttl_s

    def load(self, key: TileKey, now: float | None = None) -> Image.Image | None:
        """
        Decode a fresh cached tile.

        Returns:
            RGBA image, or None when the file is missing, stale or corrupted.
        """
        if not self.is_fresh(key, now):
            return None
        path = self.path_for(key)
        try:
            with Image.open(path) as img:
                img.load()
                tile = img.convert('RGBA')
        except (OSError, ValueError) as e:
            logger.warning('Cached tile corrupted, reloading from server: %s (%s)', path, e)
            return None
        self.touch(path)
        return tile

    def store(self, key: TileKey, image: Image.Image) -> bool:
        """Save a tile as PNG and register it in the index."""
        path = self.path_for(key)
        try:
            image.save(path, 'PNG')
        except (OSError, ValueError) as e:
            logger.warning('Saving tile to cache failed: %s (%s)', path, e)
            return False
        self.touch(path)
        return True

    def touch(self, path: Path, timestamp: float | None = None) -> None:
        """Add a file to the recency index or refresh its timestamp."""
        ts = time.time() if timestamp is None else timestamp
        with self._lock:
            entry = self._index.get(path)
            if entry is None:
                self._index[path] = TileListEntry(path=path, timestamp=ts)
            else:
                entry.timestamp = ts
                self._index.move_to_end(path)

    def scan(self) -> int:
        """
        Register the *.png files already in the cache directory.

        Returns:
            Number of files indexed.
        """
        found: list[tuple[float, Path]] = []
        try:
            for path in self.cache_dir.glob('*.png'):
                try:
                    found.append((path.stat().st_mtime, path))
                except OSError:
                    continue
        except OSError as e:
            logger.warning('Could not read files from cache: %s', e)
            return 0
        found.sort()
        for mtime, path in found:
            self.touch(path, timestamp=mtime)
        logger.info('Indexed %d cached tiles', len(found))
        return len(found)

    def recent(self) -> list[TileListEntry]:
        """Index entries, most recently used first."""
        with self._lock:
            return [
                TileListEntry(path=e.path, timestamp=e.timestamp)
                for e in reversed(self._index.values())
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)
