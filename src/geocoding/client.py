from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from geocoding.parser import parse_forward_response, parse_reverse_response
from geocoding.query import reverse_geocode_url
from infrastructure.http.client import fetch_bytes

if TYPE_CHECKING:
    import aiohttp

    from domain.models import Address, Coordinate, ServiceSettings

logger = logging.getLogger(__name__)


class GeocodeClient:
    """Remote geocoder: one HTTP GET plus XML parsing per call.

    Errors propagate as RemoteUnreachable / ParseFailure.
    """

    def __init__(self, client: aiohttp.ClientSession, settings: ServiceSettings) -> None:
        self.client = client
        self.settings = settings

    async def forward(self, url: str) -> list[Coordinate]:
        """Resolve a prepared forward-geocode URL to coordinates."""
        data = await fetch_bytes(self.client, url, timeout=self.settings.http_timeout_s)
        return parse_forward_response(data)

    async def reverse(self, coordinate: Coordinate) -> Address:
        url = reverse_geocode_url(
            self.settings.provider_url, self.settings.api_token, coordinate
        )
        data = await fetch_bytes(self.client, url, timeout=self.settings.http_timeout_s)
        address = parse_reverse_response(
            data, taiwan_country_fix=self.settings.taiwan_country_fix
        )
        logger.debug(
            'Reverse geocoded %.6f,%.6f -> %s, %s',
            coordinate.latitude,
            coordinate.longitude,
            address.town,
            address.country,
        )
        return address
