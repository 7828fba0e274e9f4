"""Service context - process-wide state shared by dispatcher and worker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from connectivity.gate import ConnectivityGate
    from domain.models import ServiceSettings
    from geocoding.cache import GeocodeCache
    from geocoding.client import GeocodeClient
    from tiles.cache import TileCache
    from tiles.compositor import TileCompositor


@dataclass
class ServiceContext:
    """
    Everything a job needs, built once at startup.

    The caches and the gate carry their own locks: they are also read from
    the caller-facing side while the worker runs.
    """

    settings: ServiceSettings
    gate: ConnectivityGate
    geocode_cache: GeocodeCache
    tile_cache: TileCache
    geocoder: GeocodeClient
    compositor: TileCompositor
