"""Result sinks: where job outcomes are delivered."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from services.jobs import JobOutcome
from shared.constants import JOB_QUEUE_SIZE

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    def emit(self, outcome: JobOutcome) -> None: ...


class CallbackSink:
    """Forward every outcome to a plain callable."""

    def __init__(self, callback: Callable[[JobOutcome], None]) -> None:
        self._callback = callback

    def emit(self, outcome: JobOutcome) -> None:
        self._callback(outcome)


class LoggingSink:
    def emit(self, outcome: JobOutcome) -> None:
        if outcome.ok:
            logger.info('Job %d (%s) succeeded', outcome.token, outcome.kind.value)
        else:
            logger.warning(
                'Job %d (%s) failed: %s %s',
                outcome.token,
                outcome.kind.value,
                outcome.error_code,
                outcome.error,
            )


class FutureSink:
    """Lets in-process callers await the outcome of a token.

    Outcomes that arrive before anyone waits for them are kept until
    collected, up to max_unclaimed; beyond that the oldest unclaimed outcome
    is dropped with a warning. Hosts that never wait on their tokens should
    use CallbackSink instead.

    Usage:
        sink = FutureSink()
        token = dispatcher.reverse_geocode(lat, lon)
        outcome = await sink.wait(token)
    """

    def __init__(self, max_unclaimed: int = JOB_QUEUE_SIZE) -> None:
        self.max_unclaimed = max_unclaimed
        self._futures: dict[int, asyncio.Future[JobOutcome]] = {}

    def _future(self, token: int) -> asyncio.Future[JobOutcome]:
        fut = self._futures.get(token)
        if fut is None:
            fut = asyncio.get_running_loop().create_future()
            self._futures[token] = fut
        return fut

    def emit(self, outcome: JobOutcome) -> None:
        fut = self._future(outcome.token)
        if fut.done():
            logger.error('Duplicate outcome for job %d ignored', outcome.token)
            return
        fut.set_result(outcome)
        self._drop_unclaimed()

    def _drop_unclaimed(self) -> None:
        unclaimed = [t for t, f in self._futures.items() if f.done()]
        for token in unclaimed[: max(0, len(unclaimed) - self.max_unclaimed)]:
            del self._futures[token]
            logger.warning('Outcome for job %d was never collected, dropped', token)

    async def wait(self, token: int) -> JobOutcome:
        fut = self._future(token)
        try:
            return await fut
        finally:
            self._futures.pop(token, None)

    def pending(self) -> int:
        return sum(1 for f in self._futures.values() if not f.done())

    def unclaimed(self) -> int:
        return sum(1 for f in self._futures.values() if f.done())
