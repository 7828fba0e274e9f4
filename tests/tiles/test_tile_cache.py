"""Tests for the on-disk tile cache."""

import os
import time

from PIL import Image

from shared.constants import SECONDS_PER_DAY
from tiles.cache import TileCache, TileKey


def _age(path, days):
    ts = time.time() - days * SECONDS_PER_DAY
    os.utime(path, (ts, ts))


class TestTileKey:
    def test_filename_fixed_width(self):
        """Fields are zero padded: zoom 2, x 6, y 6, style 2 digits."""
        assert TileKey(5, 17, 9, 9).filename == '05000017000009' + '09.png'
        assert TileKey(18, 262143, 1, 18).filename == '18262143000001' + '18.png'


class TestTileCache:
    def test_creates_directory(self, tmp_path):
        cache_dir = tmp_path / 'a' / 'b'
        TileCache(cache_dir)
        assert cache_dir.is_dir()

    def test_store_then_load(self, tmp_path):
        cache = TileCache(tmp_path)
        key = TileKey(3, 1, 2, 5)
        assert cache.load(key) is None

        assert cache.store(key, Image.new('RGB', (256, 256), (0, 128, 0)))
        assert cache.path_for(key).exists()
        img = cache.load(key)
        assert img.mode == 'RGBA'
        assert img.size == (256, 256)
        assert img.getpixel((10, 10)) == (0, 128, 0, 255)

    def test_stale_file_is_a_miss(self, tmp_path):
        cache = TileCache(tmp_path)
        key = TileKey(3, 1, 2, 5)
        cache.store(key, Image.new('RGBA', (256, 256)))
        assert cache.is_fresh(key)

        _age(cache.path_for(key), 31)
        assert not cache.is_fresh(key)
        assert cache.load(key) is None

    def test_corrupted_file_is_a_miss(self, tmp_path):
        cache = TileCache(tmp_path)
        key = TileKey(3, 1, 2, 5)
        cache.path_for(key).write_bytes(b'not a png')
        assert cache.is_fresh(key)
        assert cache.load(key) is None

    def test_scan_indexes_existing_files(self, tmp_path):
        """Start-up scan registers *.png files, oldest first."""
        for name, days in (('old.png', 3), ('new.png', 1)):
            p = tmp_path / name
            Image.new('RGBA', (1, 1)).save(p, 'PNG')
            _age(p, days)
        (tmp_path / 'notes.txt').write_text('x')

        cache = TileCache(tmp_path)
        assert cache.scan() == 2
        assert len(cache) == 2
        assert [e.path.name for e in cache.recent()] == ['new.png', 'old.png']

    def test_access_refreshes_recency(self, tmp_path):
        cache = TileCache(tmp_path)
        a, b = TileKey(1, 0, 0, 5), TileKey(1, 1, 0, 5)
        cache.store(a, Image.new('RGBA', (256, 256)))
        cache.store(b, Image.new('RGBA', (256, 256)))
        assert cache.recent()[0].path == cache.path_for(b)

        cache.load(a)
        assert cache.recent()[0].path == cache.path_for(a)
        assert len(cache) == 2
