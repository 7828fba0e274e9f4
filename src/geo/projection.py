"""
Web Mercator tile-space projection.

At zoom z the world spans n = 2**z tiles per axis. Tile-space coordinates are
fractional tile indices: integer part selects the tile, the fraction times
TILE_SIZE is the pixel inside it.
"""

from __future__ import annotations

import math

from shared.constants import MAX_ZOOM


def clamp_zoom(zoom: int) -> int:
    """Limit zoom to [0, MAX_ZOOM]."""
    return max(0, min(int(zoom), MAX_ZOOM))


def tiles_per_axis(zoom: int) -> float:
    return float(2**zoom)


def lon_to_tile_x(lon_deg: float, zoom: int) -> float:
    """Longitude -> fractional tile x."""
    return (lon_deg + 180.0) / 360.0 * tiles_per_axis(zoom)


def lat_to_tile_y(lat_deg: float, zoom: int) -> float:
    """Latitude -> fractional tile y (0 at the northern edge)."""
    lat = math.radians(lat_deg)
    merc = math.log(math.tan(lat) + 1.0 / math.cos(lat))
    return (math.pi - merc) / (2.0 * math.pi) * tiles_per_axis(zoom)


def tile_x_to_lon(x: float, n: float) -> float:
    """Fractional tile x -> longitude, n = 2**zoom."""
    return (2.0 * x / n - 1.0) * 180.0


def tile_y_to_lat(y: float, n: float) -> float:
    """Fractional tile y -> latitude, n = 2**zoom."""
    return (
        (math.atan(math.exp((2.0 * (1.0 - y / n) - 1.0) * math.pi)) - math.pi / 4)
        * 360.0
        / math.pi
    )


def latlng_to_tile_xy(lat_deg: float, lon_deg: float, zoom: int) -> tuple[float, float]:
    return lon_to_tile_x(lon_deg, zoom), lat_to_tile_y(lat_deg, zoom)


def tile_xy_to_latlng(x: float, y: float, zoom: int) -> tuple[float, float]:
    n = tiles_per_axis(zoom)
    return tile_y_to_lat(y, n), tile_x_to_lon(x, n)
