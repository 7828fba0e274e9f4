"""Job model: queued requests and their single outcome."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domain.models import Coordinate


class JobKind(str, Enum):
    FORWARD_GEOCODE = 'forward_geocode'
    FORWARD_GEOCODE_VERBOSE = 'forward_geocode_verbose'
    REVERSE_GEOCODE = 'reverse_geocode'
    REVERSE_GEOCODE_VERBOSE = 'reverse_geocode_verbose'
    GET_MAP_TILE = 'get_map_tile'
    GET_CATEGORIES = 'get_categories'

    @property
    def verbose(self) -> bool:
        return self in (JobKind.FORWARD_GEOCODE_VERBOSE, JobKind.REVERSE_GEOCODE_VERBOSE)

    @property
    def is_forward(self) -> bool:
        return self in (JobKind.FORWARD_GEOCODE, JobKind.FORWARD_GEOCODE_VERBOSE)

    @property
    def is_reverse(self) -> bool:
        return self in (JobKind.REVERSE_GEOCODE, JobKind.REVERSE_GEOCODE_VERBOSE)


@dataclass(frozen=True)
class ForwardGeocodePayload:
    # Prepared request URL; the terms are only kept for logging
    url: str
    terms: tuple[str | None, ...] = ()


@dataclass(frozen=True)
class ReverseGeocodePayload:
    coordinate: Coordinate


@dataclass(frozen=True)
class MapTilePayload:
    latitude: float
    longitude: float
    zoom: int
    width: int
    height: int
    style_bits: int


@dataclass
class Job:
    token: int
    kind: JobKind
    payload: Any = None
    created_at: float = field(default_factory=time.monotonic)


@dataclass
class JobOutcome:
    """Exactly one per job: either value or error is set."""

    token: int
    kind: JobKind
    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> str | None:
        if self.error is None:
            return None
        return getattr(self.error, 'code', 'internal')
