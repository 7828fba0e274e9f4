from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote

from domain.models import Coordinate
from shared.constants import FORWARD_TERM_PARAMS


def forward_params(terms: Sequence[str | None]) -> list[tuple[str, str]]:
    """
    Map the caller's sparse term array to query parameters.

    Only positions 0, 2, 4, 7 and 8 are meaningful (num, str, city, zip,
    ctr). Positions that are missing, None or empty are left out.
    """
    params: list[tuple[str, str]] = []
    for index, name in FORWARD_TERM_PARAMS:
        if index >= len(terms):
            continue
        value = terms[index]
        if value:
            params.append((name, value))
    return params


def encode_params(params: Sequence[tuple[str, str]]) -> str:
    return '&'.join(f'{name}={quote(value, safe="")}' for name, value in params)


def forward_geocode_url(provider_url: str, token: str, terms: Sequence[str | None]) -> str:
    """GET URL for address -> coordinates."""
    url = f'{provider_url}/gc/1.0?total=1&token={token}'
    query = encode_params(forward_params(terms))
    return f'{url}&{query}' if query else url


def reverse_geocode_url(provider_url: str, token: str, coordinate: Coordinate) -> str:
    """GET URL for coordinates -> address."""
    # repr() gives the shortest string that round-trips the float
    lat = repr(float(coordinate.latitude))
    lon = repr(float(coordinate.longitude))
    return f'{provider_url}/rgc/1.0?total=1&lat={lat}&long={lon}&token={token}'
