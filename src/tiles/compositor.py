from __future__ import annotations

import asyncio
import logging
from io import BytesIO
from typing import TYPE_CHECKING

from PIL import Image

from domain.errors import LocationServiceError, TileFetchFailure
from domain.models import MapTile
from geo.projection import clamp_zoom
from shared.constants import TILE_SIZE
from tiles.cache import TileKey
from tiles.grid import grid_for_viewport
from tiles.style import normalize_style

if TYPE_CHECKING:
    from tiles.cache import TileCache
    from tiles.fetcher import TileFetcher
    from tiles.style import TileStyle

logger = logging.getLogger(__name__)


def encode_png(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, 'PNG')
    return buf.getvalue()


class TileCompositor:
    """Stitches cached or downloaded tiles into a single viewport image."""

    def __init__(self, cache: TileCache, fetcher: TileFetcher) -> None:
        self.cache = cache
        self.fetcher = fetcher

    async def materialize(self, key: TileKey, style: TileStyle) -> Image.Image:
        """Return one tile from the cache, downloading and caching it on a miss."""
        tile = await asyncio.to_thread(self.cache.load, key)
        if tile is not None:
            return tile
        logger.debug('Tile %s not cached, downloading', key.filename)
        tile = await self.fetcher.fetch(key, style)
        if tile.size != (TILE_SIZE, TILE_SIZE):
            tile = tile.crop((0, 0, TILE_SIZE, TILE_SIZE))
        await asyncio.to_thread(self.cache.store, key, tile)
        return tile

    async def get_map_tile(
        self,
        latitude: float,
        longitude: float,
        zoom: int,
        width: int,
        height: int,
        style_bits: int,
    ) -> MapTile:
        """
        Build a width x height image centred on (latitude, longitude).

        Either every covering tile is available and the image is produced, or
        the whole request fails with TileFetchFailure.
        """
        if not -90.0 < latitude < 90.0:
            msg = f'Latitude {latitude} is outside the projectable range'
            raise TileFetchFailure(msg)
        zoom = clamp_zoom(zoom)
        style = normalize_style(style_bits)
        grid = grid_for_viewport(latitude, longitude, zoom, width, height)
        logger.info(
            'Map tile z=%d %dx%d style=%s: %dx%d tiles',
            zoom,
            width,
            height,
            style.url_segment,
            grid.cols,
            grid.rows,
        )

        canvas = Image.new('RGBA', (grid.canvas_width, grid.canvas_height))
        for cell in grid.cells():
            if not 0 <= cell.tile_y < grid.n:
                msg = f'Tile row {cell.tile_y} outside the map at zoom {zoom}'
                raise TileFetchFailure(msg)
            key = TileKey(zoom=zoom, x=cell.tile_x, y=cell.tile_y, style_bits=style.bits)
            try:
                tile = await self.materialize(key, style)
            except LocationServiceError as e:
                logger.warning('Tile %s unavailable: %s', key.filename, e)
                msg = f'Failed to get tile {key.filename}: {e}'
                raise TileFetchFailure(msg) from e
            canvas.paste(tile, (cell.x_off, cell.y_off))

        image = canvas.crop(grid.crop_box)
        north_west, south_east = grid.bounds()
        png = await asyncio.to_thread(encode_png, image)
        return MapTile(
            png=png,
            width=width,
            height=height,
            north_west=north_west,
            south_east=south_east,
        )
