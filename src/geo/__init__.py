"""Geo module - Web Mercator tile projection and distances."""

from .distance import great_circle_m
from .projection import (
    clamp_zoom,
    lat_to_tile_y,
    latlng_to_tile_xy,
    lon_to_tile_x,
    tile_x_to_lon,
    tile_xy_to_latlng,
    tile_y_to_lat,
)

__all__ = [
    'clamp_zoom',
    'great_circle_m',
    'lat_to_tile_y',
    'latlng_to_tile_xy',
    'lon_to_tile_x',
    'tile_x_to_lon',
    'tile_xy_to_latlng',
    'tile_y_to_lat',
]
