from __future__ import annotations

import logging
from io import BytesIO
from typing import TYPE_CHECKING

from PIL import Image

from domain.errors import ConnectivityFailure, DecodeFailure
from infrastructure.http.client import fetch_bytes
from shared.constants import TILE_SIZE

if TYPE_CHECKING:
    import aiohttp

    from connectivity.gate import ConnectivityGate
    from domain.models import ServiceSettings
    from tiles.cache import TileKey
    from tiles.style import TileStyle

logger = logging.getLogger(__name__)


def decode_tile(data: bytes) -> Image.Image:
    """Decode tile bytes to RGBA; raises DecodeFailure."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return img.convert('RGBA')
    except (OSError, ValueError) as e:
        msg = f'Error loading map tile: {e}'
        raise DecodeFailure(msg) from None


class TileFetcher:
    """Downloads single map tiles from the tile endpoint."""

    def __init__(
        self,
        client: aiohttp.ClientSession,
        gate: ConnectivityGate,
        settings: ServiceSettings,
    ) -> None:
        self.client = client
        self.gate = gate
        self.settings = settings
        self._stats_downloads = 0
        self._stats_errors = 0

    def tile_url(self, key: TileKey, style: TileStyle) -> str:
        return (
            f'{self.settings.tile_base_url}/{style.url_segment}/'
            f'{key.zoom}/{key.x}/{key.y}/{TILE_SIZE}/{self.settings.tile_format}'
            f'?token={self.settings.api_token}'
        )

    @property
    def stats(self) -> dict:
        return {
            'downloads': self._stats_downloads,
            'errors': self._stats_errors,
        }

    async def fetch(self, key: TileKey, style: TileStyle) -> Image.Image:
        """
        Download and decode one tile.

        Raises:
            ConnectivityFailure: connection attempts are suspended.
            RemoteUnreachable: transport failure or non-200 status.
            DecodeFailure: the body is not an image.
        """
        if self.gate.do_not_connect:
            msg = 'Connection attempts suspended'
            raise ConnectivityFailure(msg)
        await self.gate.ensure_connected()
        try:
            data = await fetch_bytes(
                self.client,
                self.tile_url(key, style),
                timeout=self.settings.http_timeout_s,
            )
            tile = decode_tile(data)
        except Exception:
            self._stats_errors += 1
            raise
        self._stats_downloads += 1
        return tile
