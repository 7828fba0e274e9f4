"""Connectivity gating.

ConnectivityGate keeps the last network status reported by the reachability
monitor and decides whether a remote call may be attempted.

Status events may arrive from any thread; every field is read and written
under one lock. A connection attempt is started at most once: concurrent
callers of ensure_connected() wait on the same in-flight attempt.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class LinkStatus(str, Enum):
    CONNECTED = 'connected'
    CONNECTING = 'connecting'
    DISCONNECTING = 'disconnecting'
    DISCONNECTED = 'disconnected'


class LinkError(str, Enum):
    NONE = 'none'
    INVALID_IAP = 'invalid_iap'
    CONNECTION_FAILED = 'connection_failed'
    USER_CANCELED = 'user_canceled'


# Errors after which a disconnected link suspends further attempts
_SOFT_ERRORS = (LinkError.NONE, LinkError.USER_CANCELED)


class ReachabilityMonitor(Protocol):
    def request_connection(self, gate: ConnectivityGate) -> None:
        """Start a connection attempt; report via gate.on_status_event()."""
        ...


class ConnectivityGate:
    """Network reachability state shared by the dispatcher and the worker.

    Usage:
        gate = ConnectivityGate(monitor)
        if gate.may_attempt(strict=True):
            await gate.ensure_connected()

    ensure_connected() has no timeout: a monitor that never reports back
    keeps the caller waiting.
    """

    def __init__(self, monitor: ReachabilityMonitor) -> None:
        self._monitor = monitor
        self._lock = threading.Lock()
        self._status = LinkStatus.DISCONNECTED
        self._error = LinkError.NONE
        self._do_not_connect = False
        self._offline = False
        self._attempt: asyncio.Future[None] | None = None
        self._attempt_loop: asyncio.AbstractEventLoop | None = None

    @property
    def status(self) -> LinkStatus:
        with self._lock:
            return self._status

    @property
    def error(self) -> LinkError:
        with self._lock:
            return self._error

    @property
    def do_not_connect(self) -> bool:
        """True while reconnect attempts are suspended."""
        with self._lock:
            return self._do_not_connect

    @property
    def offline(self) -> bool:
        with self._lock:
            return self._offline

    def snapshot(self) -> tuple[LinkStatus, LinkError]:
        with self._lock:
            return self._status, self._error

    def may_attempt(self, strict: bool) -> bool:
        """
        Whether a network call may be attempted.

        Lenient callers are always allowed. Strict callers are refused only
        when the link is down with a hard error; a disconnected link with no
        error or a user cancellation still lets them through.
        """
        if not strict:
            return True
        status, error = self.snapshot()
        return not (status == LinkStatus.DISCONNECTED and error not in _SOFT_ERRORS)

    def set_offline_mode(self, offline: bool) -> None:
        """Device-wide offline (flight) mode, reported by the monitor."""
        with self._lock:
            self._offline = bool(offline)
        logger.info('Offline mode %s', 'on' if offline else 'off')

    def clear_latch(self) -> None:
        with self._lock:
            if not self._do_not_connect:
                return
            self._do_not_connect = False
        logger.info('Connection attempts re-enabled')

    def on_status_event(self, status: LinkStatus, error: LinkError = LinkError.NONE) -> None:
        """Monitor callback; safe to call from any thread."""
        with self._lock:
            self._status = LinkStatus(status)
            self._error = LinkError(error)
            attempt = self._attempt
            loop = self._attempt_loop
            self._attempt = None
            self._attempt_loop = None
        logger.debug('Link status %s (error %s)', status, error)
        if attempt is not None and loop is not None:
            loop.call_soon_threadsafe(_resolve, attempt)

    async def ensure_connected(self) -> LinkStatus:
        """
        Make sure a connection attempt has been made.

        Starts one through the monitor unless the link is already up, then
        waits for the monitor's next status event. A caller arriving while an
        attempt is in flight waits for that attempt instead of starting another.
        """
        loop = asyncio.get_running_loop()
        initiate = False
        with self._lock:
            if self._attempt is not None:
                attempt: asyncio.Future[None] | None = self._attempt
            elif self._status == LinkStatus.CONNECTED:
                attempt = None
            else:
                attempt = loop.create_future()
                self._attempt = attempt
                self._attempt_loop = loop
                initiate = True

        if initiate:
            logger.info('Requesting network connection')
            self._monitor.request_connection(self)
        if attempt is not None:
            await asyncio.shield(attempt)

        with self._lock:
            status, error = self._status, self._error
            if (
                not self._do_not_connect
                and status == LinkStatus.DISCONNECTED
                and error in _SOFT_ERRORS
            ):
                self._do_not_connect = True
                logger.info(
                    'Connection not established (%s), suspending attempts until the queue drains',
                    error.value,
                )
        return status


def _resolve(fut: asyncio.Future[None]) -> None:
    if not fut.done():
        fut.set_result(None)
