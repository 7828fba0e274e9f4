"""Covering tile grid for a pixel viewport.

The viewport is centred on a tile-space point and extends (width // 2) and
(height // 2) pixels to each side. Its top-left corner falls somewhere inside
a tile; the working canvas starts at that tile's corner and is rounded up to
whole tiles, so it contains every tile the viewport touches and nothing more.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from domain.models import Coordinate
from geo.projection import latlng_to_tile_xy, tile_x_to_lon, tile_y_to_lat
from shared.constants import TILE_SIZE


def roundup_tile(n: int) -> int:
    """Round up to the next multiple of TILE_SIZE."""
    r = n % TILE_SIZE
    return n + TILE_SIZE - r if r else n


@dataclass(frozen=True)
class TileCell:
    """One tile of the grid and its offset inside the canvas."""

    tile_x: int
    tile_y: int
    x_off: int
    y_off: int


@dataclass(frozen=True)
class TileGrid:
    zoom: int
    center_x: float
    center_y: float
    width: int
    height: int
    # Half extents in tile units
    half_w: float
    half_h: float
    # Unwrapped tile index of the canvas's top-left tile
    origin_x: int
    origin_y: int
    # Viewport offset inside the canvas
    pix_left: int
    pix_top: int
    canvas_width: int
    canvas_height: int

    @property
    def n(self) -> int:
        return 2**self.zoom

    @property
    def cols(self) -> int:
        return self.canvas_width // TILE_SIZE

    @property
    def rows(self) -> int:
        return self.canvas_height // TILE_SIZE

    @property
    def crop_box(self) -> tuple[int, int, int, int]:
        return (
            self.pix_left,
            self.pix_top,
            self.pix_left + self.width,
            self.pix_top + self.height,
        )

    def cells(self) -> Iterator[TileCell]:
        """Tiles column by column; x indices wrap around the antimeridian."""
        for i in range(self.cols):
            for j in range(self.rows):
                yield TileCell(
                    tile_x=(self.origin_x + i) % self.n,
                    tile_y=self.origin_y + j,
                    x_off=i * TILE_SIZE,
                    y_off=j * TILE_SIZE,
                )

    def bounds(self) -> tuple[Coordinate, Coordinate]:
        """North-west and south-east corners of the viewport."""
        n = float(self.n)
        nw = Coordinate(
            tile_y_to_lat(self.center_y - self.half_h, n),
            tile_x_to_lon(self.center_x - self.half_w, n),
        )
        se = Coordinate(
            tile_y_to_lat(self.center_y + self.half_h, n),
            tile_x_to_lon(self.center_x + self.half_w, n),
        )
        return nw, se


def covering_grid(x: float, y: float, zoom: int, width: int, height: int) -> TileGrid:
    """Covering grid for a viewport centred on tile-space point (x, y)."""
    half_w = (width // 2) / TILE_SIZE
    half_h = (height // 2) / TILE_SIZE
    left = x - half_w
    top = y - half_h
    origin_x = math.floor(left)
    origin_y = math.floor(top)
    pix_left = int((left - origin_x) * TILE_SIZE)
    pix_top = int((top - origin_y) * TILE_SIZE)
    return TileGrid(
        zoom=zoom,
        center_x=x,
        center_y=y,
        width=width,
        height=height,
        half_w=half_w,
        half_h=half_h,
        origin_x=origin_x,
        origin_y=origin_y,
        pix_left=pix_left,
        pix_top=pix_top,
        canvas_width=roundup_tile(pix_left + width),
        canvas_height=roundup_tile(pix_top + height),
    )


def grid_for_viewport(lat: float, lon: float, zoom: int, width: int, height: int) -> TileGrid:
    x, y = latlng_to_tile_xy(lat, lon, zoom)
    return covering_grid(x, y, zoom, width, height)
