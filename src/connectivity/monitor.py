"""Reachability monitors feeding ConnectivityGate."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from connectivity.gate import LinkError, LinkStatus
from domain.errors import RemoteUnreachable
from infrastructure.http.client import fetch_bytes, loggable_url
from shared.constants import HTTP_TIMEOUT_DEFAULT

if TYPE_CHECKING:
    import aiohttp

    from connectivity.gate import ConnectivityGate

logger = logging.getLogger(__name__)


class StaticMonitor:
    """Answers every connection request with a fixed status."""

    def __init__(
        self,
        status: LinkStatus = LinkStatus.CONNECTED,
        error: LinkError = LinkError.NONE,
    ) -> None:
        self.status = status
        self.error = error
        self.requests = 0

    def request_connection(self, gate: ConnectivityGate) -> None:
        self.requests += 1
        gate.on_status_event(self.status, self.error)


class HttpProbeMonitor:
    """Treats the network as up when a probe URL answers.

    Each connection request spawns one probe task; the gate is told
    CONNECTED on success and DISCONNECTED/CONNECTION_FAILED otherwise.
    """

    def __init__(
        self,
        client: aiohttp.ClientSession,
        probe_url: str,
        *,
        timeout: float = HTTP_TIMEOUT_DEFAULT,
    ) -> None:
        self.client = client
        self.probe_url = probe_url
        self.timeout = timeout
        self._tasks: set[asyncio.Task[None]] = set()

    def request_connection(self, gate: ConnectivityGate) -> None:
        task = asyncio.get_running_loop().create_task(self._probe(gate))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _probe(self, gate: ConnectivityGate) -> None:
        try:
            await fetch_bytes(self.client, self.probe_url, timeout=self.timeout)
        except RemoteUnreachable as e:
            logger.warning('Reachability probe failed: %s', e)
            gate.on_status_event(LinkStatus.DISCONNECTED, LinkError.CONNECTION_FAILED)
            return
        logger.info('Reachability probe to %s succeeded', loggable_url(self.probe_url))
        gate.on_status_event(LinkStatus.CONNECTED, LinkError.NONE)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
