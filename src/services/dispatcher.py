"""Request dispatcher - the caller-facing entry points.

Every method returns immediately. Asynchronous requests get a correlation
token and are answered later through the result sink; synchronous denials
are raised on the spot and never produce an outcome.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING

from domain.errors import OfflineDenied
from domain.models import Address, Coordinate
from geo.projection import clamp_zoom
from geocoding.query import forward_geocode_url
from services.jobs import (
    ForwardGeocodePayload,
    Job,
    JobKind,
    MapTilePayload,
    ReverseGeocodePayload,
)
from shared.constants import MAX_ZOOM

if TYPE_CHECKING:
    from services.context import ServiceContext
    from services.worker import Worker

logger = logging.getLogger(__name__)


class RequestDispatcher:
    def __init__(self, context: ServiceContext, worker: Worker) -> None:
        self.context = context
        self.worker = worker
        self._tokens = itertools.count(1)
        self._token_lock = threading.Lock()

    def _next_token(self) -> int:
        with self._token_lock:
            return next(self._tokens)

    def _submit(self, kind: JobKind, payload: object = None) -> int:
        token = self._next_token()
        self.worker.submit(Job(token=token, kind=kind, payload=payload))
        logger.debug('Queued job %d (%s)', token, kind.value)
        return token

    def _check_online(self, what: str) -> None:
        """Refuse up front when offline or when a strict attempt would be denied."""
        gate = self.context.gate
        if gate.offline:
            msg = f'{what} not possible in offline mode'
            raise OfflineDenied(msg)
        if not gate.may_attempt(strict=True):
            status, error = gate.snapshot()
            msg = f'{what} refused: link {status.value} ({error.value})'
            raise OfflineDenied(msg)

    def forward_geocode(self, terms: Sequence[str | None], verbose: bool = False) -> int:
        """
        Queue an address -> coordinates lookup.

        Args:
            terms: Sparse address terms; positions 0, 2, 4, 7 and 8 are used
                (house number, street, city, postal code, country).
            verbose: Strict connectivity policy inside the worker.

        Returns:
            Correlation token.
        """
        self._check_online('Forward geocoding')
        settings = self.context.settings
        url = forward_geocode_url(settings.provider_url, settings.api_token, terms)
        kind = JobKind.FORWARD_GEOCODE_VERBOSE if verbose else JobKind.FORWARD_GEOCODE
        payload = ForwardGeocodePayload(url=url, terms=tuple(terms))
        return self._submit(kind, payload)

    def reverse_geocode(self, latitude: float, longitude: float, verbose: bool = False) -> int:
        """Queue a coordinates -> address lookup; never denied up front."""
        kind = JobKind.REVERSE_GEOCODE_VERBOSE if verbose else JobKind.REVERSE_GEOCODE
        coordinate = Coordinate(float(latitude), float(longitude))
        return self._submit(kind, ReverseGeocodePayload(coordinate=coordinate))

    def get_map_tile(
        self,
        latitude: float,
        longitude: float,
        zoom: int,
        width: int,
        height: int,
        style_bits: int = 0,
    ) -> int:
        """Queue a map image request centred on the given point."""
        if width <= 0 or height <= 0:
            msg = f'Invalid map size {width}x{height}'
            raise ValueError(msg)
        self._check_online('Map tile download')
        if zoom > MAX_ZOOM:
            logger.warning('Maximum zoom level is %d', MAX_ZOOM)
        payload = MapTilePayload(
            latitude=float(latitude),
            longitude=float(longitude),
            zoom=clamp_zoom(zoom),
            width=int(width),
            height=int(height),
            style_bits=int(style_bits),
        )
        return self._submit(JobKind.GET_MAP_TILE, payload)

    def get_categories(self) -> int:
        return self._submit(JobKind.GET_CATEGORIES)

    def lookup_cached(
        self, latitude: float, longitude: float, tolerance_m: float = 0.0
    ) -> Address | None:
        """Cached address near the point, or None; bypasses the job queue."""
        coordinate = Coordinate(float(latitude), float(longitude))
        return self.context.geocode_cache.lookup(coordinate, tolerance_m)
