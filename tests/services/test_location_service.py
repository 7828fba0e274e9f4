"""End-to-end tests for LocationService with remote endpoints mocked."""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from PIL import Image

from connectivity.monitor import HttpProbeMonitor, StaticMonitor
from domain.errors import OfflineDenied
from domain.models import Address, Coordinate
from services.location_service import LocationService
from services.notifier import FutureSink

REVERSE_XML = b"""<places xmlns="nokia:geocoder:gc:1.0"><place><address>
<country>Finland</country><city>Helsinki</city>
<thoroughfare><name>Mannerheimintie</name><number>1</number></thoroughfare>
</address></place></places>"""


class TestLocationService:
    @pytest.mark.asyncio
    async def test_reverse_then_cached_lookup(self, settings):
        sink = FutureSink()
        fetch = AsyncMock(return_value=REVERSE_XML)
        with patch('geocoding.client.fetch_bytes', new=fetch):
            async with LocationService(
                settings, sink=sink, monitor=StaticMonitor(), session=MagicMock()
            ) as service:
                d = service.dispatcher
                outcome = await sink.wait(d.reverse_geocode(60.17, 24.94))
                assert outcome.ok
                assert outcome.value[0].as_list() == [
                    '1', '', 'Mannerheimintie', '', 'Helsinki', '', '', '', 'Finland', '', '',
                ]

                # Second request is answered from the cache
                outcome = await sink.wait(d.reverse_geocode(60.17, 24.94))
                assert outcome.value[0].town == 'Helsinki'
                assert fetch.await_count == 1

                assert d.lookup_cached(60.1701, 24.9401, tolerance_m=100.0).street == (
                    'Mannerheimintie'
                )

    @pytest.mark.asyncio
    async def test_map_tile(self, settings, red_png):
        sink = FutureSink()
        with patch('tiles.fetcher.fetch_bytes', new=AsyncMock(return_value=red_png)):
            async with LocationService(
                settings, sink=sink, monitor=StaticMonitor(), session=MagicMock()
            ) as service:
                token = service.dispatcher.get_map_tile(60.17, 24.94, 12, 320, 240, 0x05)
                outcome = await sink.wait(token)

        assert outcome.ok
        assert Image.open(BytesIO(outcome.value.png)).size == (320, 240)
        assert isinstance(outcome.value.north_west, Coordinate)
        assert any(settings.cache_path.glob('12*.png'))

    @pytest.mark.asyncio
    async def test_startup_scan(self, settings, red_png):
        settings.cache_path.mkdir(parents=True)
        (settings.cache_path / '0300000100000205.png').write_bytes(red_png)
        async with LocationService(
            settings, monitor=StaticMonitor(), session=MagicMock()
        ) as service:
            assert len(service.context.tile_cache) == 1

    @pytest.mark.asyncio
    async def test_probe_monitor_selected(self, settings):
        settings = settings.model_copy(update={'probe_url': 'http://probe.test'})
        async with LocationService(settings, session=MagicMock()) as service:
            assert isinstance(service.gate._monitor, HttpProbeMonitor)

    @pytest.mark.asyncio
    async def test_offline_setting_applied(self, settings):
        """Offline mode from settings refuses network requests but serves the cache."""
        settings = settings.model_copy(update={'offline': True})
        sink = FutureSink()
        async with LocationService(
            settings, sink=sink, monitor=StaticMonitor(), session=MagicMock()
        ) as service:
            assert service.gate.offline
            d = service.dispatcher
            with pytest.raises(OfflineDenied):
                d.get_map_tile(60.17, 24.94, 12, 320, 240)
            with pytest.raises(OfflineDenied):
                d.forward_geocode(['1', None, 'Mannerheimintie'])

            service.context.geocode_cache.insert(Coordinate(60.17, 24.94), Address(town='Helsinki'))
            outcome = await sink.wait(d.reverse_geocode(60.17, 24.94))
            assert outcome.value[0].town == 'Helsinki'

    @pytest.mark.asyncio
    async def test_offline_mode_toggled(self, settings, red_png):
        sink = FutureSink()
        with patch('tiles.fetcher.fetch_bytes', new=AsyncMock(return_value=red_png)):
            async with LocationService(
                settings, sink=sink, monitor=StaticMonitor(), session=MagicMock()
            ) as service:
                assert not service.gate.offline
                service.set_offline_mode(True)
                with pytest.raises(OfflineDenied):
                    service.dispatcher.get_map_tile(60.17, 24.94, 12, 100, 100)
                service.set_offline_mode(False)
                outcome = await sink.wait(service.dispatcher.get_map_tile(60.17, 24.94, 12, 100, 100))
        assert outcome.ok

    def test_dispatcher_before_start(self, settings):
        with pytest.raises(RuntimeError):
            _ = LocationService(settings).dispatcher
