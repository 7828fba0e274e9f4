"""Forward/reverse geocoding: remote client, XML parsing and result cache."""

from geocoding.cache import GeocodeCache, GeocodeCacheEntry
from geocoding.client import GeocodeClient
from geocoding.parser import parse_forward_response, parse_reverse_response
from geocoding.query import forward_geocode_url, forward_params, reverse_geocode_url

__all__ = [
    'GeocodeCache',
    'GeocodeCacheEntry',
    'GeocodeClient',
    'forward_geocode_url',
    'forward_params',
    'parse_forward_response',
    'parse_reverse_response',
    'reverse_geocode_url',
]
