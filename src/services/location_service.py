"""Location service - wires settings, caches, gate, worker and dispatcher."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from connectivity.gate import ConnectivityGate
from connectivity.monitor import HttpProbeMonitor, StaticMonitor
from domain.models import ServiceSettings
from geocoding.cache import GeocodeCache
from geocoding.client import GeocodeClient
from infrastructure.http.client import make_http_session
from services.context import ServiceContext
from services.dispatcher import RequestDispatcher
from services.notifier import LoggingSink
from services.worker import Worker
from tiles.cache import TileCache
from tiles.compositor import TileCompositor
from tiles.fetcher import TileFetcher

if TYPE_CHECKING:
    import aiohttp

    from connectivity.gate import ReachabilityMonitor
    from services.notifier import ResultSink

logger = logging.getLogger(__name__)


class LocationService:
    """Running service instance.

    Usage:
        sink = FutureSink()
        async with LocationService(settings, sink=sink) as service:
            token = service.dispatcher.reverse_geocode(60.17, 24.94)
            outcome = await sink.wait(token)

    Without an explicit monitor, an HttpProbeMonitor is used when a probe
    URL is configured and a StaticMonitor (always connected) otherwise.
    """

    def __init__(
        self,
        settings: ServiceSettings | None = None,
        *,
        sink: ResultSink | None = None,
        monitor: ReachabilityMonitor | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.settings = settings or ServiceSettings()
        self.sink = sink or LoggingSink()
        self._monitor = monitor
        self._session = session
        self._owns_session = session is None
        self.context: ServiceContext | None = None
        self.worker: Worker | None = None
        self._dispatcher: RequestDispatcher | None = None

    @property
    def dispatcher(self) -> RequestDispatcher:
        if self._dispatcher is None:
            msg = 'LocationService is not started'
            raise RuntimeError(msg)
        return self._dispatcher

    @property
    def gate(self) -> ConnectivityGate:
        return self.dispatcher.context.gate

    def set_offline_mode(self, offline: bool) -> None:
        """Switch device offline (flight) mode on a running service."""
        self.gate.set_offline_mode(offline)

    async def start(self) -> None:
        if self._dispatcher is not None:
            return
        settings = self.settings
        if self._session is None:
            self._session = make_http_session()
        if self._monitor is None:
            if settings.probe_url:
                self._monitor = HttpProbeMonitor(
                    self._session,
                    settings.effective_probe_url,
                    timeout=settings.http_timeout_s,
                )
            else:
                self._monitor = StaticMonitor()

        gate = ConnectivityGate(self._monitor)
        if settings.offline:
            gate.set_offline_mode(True)
        tile_cache = TileCache(settings.cache_path, ttl_days=settings.tile_ttl_days)
        tile_cache.scan()
        fetcher = TileFetcher(self._session, gate, settings)
        self.context = ServiceContext(
            settings=settings,
            gate=gate,
            geocode_cache=GeocodeCache(
                limit=settings.geocode_cache_limit,
                keep=settings.geocode_cache_keep,
                ttl_days=settings.geocode_ttl_days,
            ),
            tile_cache=tile_cache,
            geocoder=GeocodeClient(self._session, settings),
            compositor=TileCompositor(tile_cache, fetcher),
        )
        self.worker = Worker(self.context, self.sink, queue_size=settings.queue_size)
        self.worker.start()
        self._dispatcher = RequestDispatcher(self.context, self.worker)
        logger.info('Location service started (cache %s)', settings.cache_path)

    async def close(self) -> None:
        if self.worker is not None:
            await self.worker.stop()
        close_monitor = getattr(self._monitor, 'close', None)
        if close_monitor is not None:
            await close_monitor()
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
        self._dispatcher = None
        logger.info('Location service stopped')

    async def __aenter__(self) -> LocationService:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
