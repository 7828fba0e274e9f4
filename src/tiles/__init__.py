"""Map tile caching and composition.

This module provides:
- TileCache: file-per-tile PNG cache with freshness checks and a recency index
- TileFetcher: HTTP fetcher for single tiles
- TileCompositor: stitches a covering grid of tiles into one viewport image
- normalize_style / covering_grid: style canonicalization and grid geometry
"""

from tiles.cache import TileCache, TileKey, TileListEntry
from tiles.compositor import TileCompositor, encode_png
from tiles.fetcher import TileFetcher, decode_tile
from tiles.grid import TileCell, TileGrid, covering_grid, grid_for_viewport
from tiles.style import TileStyle, normalize_style

__all__ = [
    'TileCache',
    'TileCell',
    'TileCompositor',
    'TileFetcher',
    'TileGrid',
    'TileKey',
    'TileListEntry',
    'TileStyle',
    'covering_grid',
    'decode_tile',
    'encode_png',
    'grid_for_viewport',
    'normalize_style',
]
