"""Tests for ConnectivityGate."""

import asyncio
import threading

import pytest

from connectivity.gate import ConnectivityGate, LinkError, LinkStatus
from connectivity.monitor import StaticMonitor


class ManualMonitor:
    """Records connection requests; the test reports status itself."""

    def __init__(self):
        self.requests = 0

    def request_connection(self, gate):
        self.requests += 1


class TestMayAttempt:
    @pytest.mark.parametrize('status', list(LinkStatus))
    @pytest.mark.parametrize('error', list(LinkError))
    def test_lenient_always_allowed(self, status, error):
        gate = ConnectivityGate(ManualMonitor())
        gate.on_status_event(status, error)
        assert gate.may_attempt(strict=False) is True

    @pytest.mark.parametrize(
        ('status', 'error', 'expected'),
        [
            (LinkStatus.DISCONNECTED, LinkError.NONE, True),
            (LinkStatus.DISCONNECTED, LinkError.USER_CANCELED, True),
            (LinkStatus.DISCONNECTED, LinkError.CONNECTION_FAILED, False),
            (LinkStatus.DISCONNECTED, LinkError.INVALID_IAP, False),
            (LinkStatus.CONNECTED, LinkError.CONNECTION_FAILED, True),
            (LinkStatus.CONNECTING, LinkError.INVALID_IAP, True),
        ],
    )
    def test_strict(self, status, error, expected):
        """Strict callers are refused only for disconnected + hard error."""
        gate = ConnectivityGate(ManualMonitor())
        gate.on_status_event(status, error)
        assert gate.may_attempt(strict=True) is expected

    def test_initial_state(self):
        gate = ConnectivityGate(ManualMonitor())
        assert gate.snapshot() == (LinkStatus.DISCONNECTED, LinkError.NONE)
        assert gate.do_not_connect is False
        assert gate.offline is False


class TestEnsureConnected:
    @pytest.mark.asyncio
    async def test_already_connected_no_request(self):
        monitor = StaticMonitor()
        gate = ConnectivityGate(monitor)
        gate.on_status_event(LinkStatus.CONNECTED)
        assert await gate.ensure_connected() == LinkStatus.CONNECTED
        assert monitor.requests == 0

    @pytest.mark.asyncio
    async def test_synchronous_monitor(self):
        """A monitor answering inside request_connection still resolves the wait."""
        monitor = StaticMonitor()
        gate = ConnectivityGate(monitor)
        assert await gate.ensure_connected() == LinkStatus.CONNECTED
        assert monitor.requests == 1
        assert gate.do_not_connect is False

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_attempt(self):
        """Two racing callers trigger exactly one connection request."""
        monitor = ManualMonitor()
        gate = ConnectivityGate(monitor)

        first = asyncio.create_task(gate.ensure_connected())
        second = asyncio.create_task(gate.ensure_connected())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert monitor.requests == 1
        assert not first.done()
        assert not second.done()

        gate.on_status_event(LinkStatus.CONNECTED)
        assert await first == LinkStatus.CONNECTED
        assert await second == LinkStatus.CONNECTED
        assert monitor.requests == 1

    @pytest.mark.asyncio
    async def test_event_from_other_thread(self):
        """Status events delivered from a foreign thread wake the waiter."""
        monitor = ManualMonitor()
        gate = ConnectivityGate(monitor)
        waiter = asyncio.create_task(gate.ensure_connected())
        await asyncio.sleep(0)

        t = threading.Thread(target=gate.on_status_event, args=(LinkStatus.CONNECTED,))
        t.start()
        t.join()

        assert await asyncio.wait_for(waiter, timeout=2.0) == LinkStatus.CONNECTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize('error', [LinkError.NONE, LinkError.USER_CANCELED])
    async def test_soft_failure_sets_latch(self, error):
        monitor = StaticMonitor(LinkStatus.DISCONNECTED, error)
        gate = ConnectivityGate(monitor)
        assert await gate.ensure_connected() == LinkStatus.DISCONNECTED
        assert gate.do_not_connect is True

    @pytest.mark.asyncio
    async def test_hard_failure_does_not_latch(self):
        monitor = StaticMonitor(LinkStatus.DISCONNECTED, LinkError.CONNECTION_FAILED)
        gate = ConnectivityGate(monitor)
        await gate.ensure_connected()
        assert gate.do_not_connect is False
        assert gate.may_attempt(strict=True) is False

    @pytest.mark.asyncio
    async def test_new_attempt_after_resolution(self):
        monitor = StaticMonitor(LinkStatus.DISCONNECTED, LinkError.CONNECTION_FAILED)
        gate = ConnectivityGate(monitor)
        await gate.ensure_connected()
        await gate.ensure_connected()
        assert monitor.requests == 2


class TestLatchAndOffline:
    @pytest.mark.asyncio
    async def test_clear_latch(self):
        gate = ConnectivityGate(StaticMonitor(LinkStatus.DISCONNECTED, LinkError.NONE))
        await gate.ensure_connected()
        assert gate.do_not_connect is True
        gate.clear_latch()
        assert gate.do_not_connect is False

    def test_offline_mode(self):
        gate = ConnectivityGate(ManualMonitor())
        gate.set_offline_mode(True)
        assert gate.offline is True
        gate.set_offline_mode(False)
        assert gate.offline is False
