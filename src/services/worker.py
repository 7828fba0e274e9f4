"""Single job worker.

One asyncio task drains a bounded queue and runs each job to completion
before taking the next one, so jobs never overlap. Every job produces
exactly one outcome, delivered to the result sink in completion order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from domain.errors import (
    ConnectivityFailure,
    InternalError,
    LocationServiceError,
    ServiceBusy,
)
from services.jobs import Job, JobKind, JobOutcome
from shared.constants import JOB_QUEUE_SIZE, PLACEHOLDER_CATEGORIES

if TYPE_CHECKING:
    from services.context import ServiceContext
    from services.notifier import ResultSink

logger = logging.getLogger(__name__)


class Worker:
    """Sequential job executor.

    Usage:
        worker = Worker(context, sink)
        worker.start()
        worker.submit(job)
        ...
        await worker.stop()  # Drains queued jobs first
    """

    def __init__(
        self,
        context: ServiceContext,
        sink: ResultSink,
        *,
        queue_size: int = JOB_QUEUE_SIZE,
    ) -> None:
        self.context = context
        self.sink = sink
        self._queue: asyncio.Queue[Job | None] = asyncio.Queue(maxsize=queue_size)
        self._task: asyncio.Task[None] | None = None
        self._stats_completed = 0
        self._stats_failed = 0

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info('Worker started')

    async def stop(self) -> None:
        """Finish queued jobs, then stop the worker task."""
        if self._task is None:
            return
        if not self._task.done():
            # None signals shutdown
            await self._queue.put(None)
            await self._task
        self._task = None
        logger.info(
            'Worker stopped: %d jobs completed, %d failed',
            self._stats_completed,
            self._stats_failed,
        )

    def submit(self, job: Job) -> None:
        """Queue a job without blocking; raises ServiceBusy when full."""
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            msg = f'Job queue full ({self._queue.maxsize} pending)'
            raise ServiceBusy(msg) from None

    async def join(self) -> None:
        """Wait until every queued job has been processed."""
        await self._queue.join()

    def queue_size(self) -> int:
        return self._queue.qsize()

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stats(self) -> dict:
        return {
            'completed': self._stats_completed,
            'failed': self._stats_failed,
            'queue_size': self.queue_size(),
            'running': self.is_running(),
        }

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                if job is None:
                    break
                outcome = await self.execute(job)
                self._deliver(outcome)
                gate = self.context.gate
                if gate.do_not_connect and self._queue.empty():
                    gate.clear_latch()
            finally:
                self._queue.task_done()

    def _deliver(self, outcome: JobOutcome) -> None:
        if outcome.ok:
            self._stats_completed += 1
        else:
            self._stats_failed += 1
        try:
            self.sink.emit(outcome)
        except Exception:
            logger.exception('Result sink failed for job %d', outcome.token)

    async def execute(self, job: Job) -> JobOutcome:
        """Run one job and wrap its result or failure into an outcome."""
        logger.debug('Running job %d (%s)', job.token, job.kind.value)
        try:
            value = await self._handle(job)
        except LocationServiceError as e:
            logger.warning('Job %d (%s) failed: %s', job.token, job.kind.value, e)
            return JobOutcome(token=job.token, kind=job.kind, error=e)
        except Exception as e:
            logger.exception('Unexpected error in job %d (%s)', job.token, job.kind.value)
            return JobOutcome(token=job.token, kind=job.kind, error=InternalError(str(e)))
        return JobOutcome(token=job.token, kind=job.kind, value=value)

    async def _handle(self, job: Job) -> Any:
        if job.kind.is_forward:
            return await self._forward_geocode(job)
        if job.kind.is_reverse:
            try:
                return await self._reverse_geocode(job)
            finally:
                self.context.geocode_cache.evict_if_needed()
        if job.kind == JobKind.GET_MAP_TILE:
            p = job.payload
            return await self.context.compositor.get_map_tile(
                p.latitude, p.longitude, p.zoom, p.width, p.height, p.style_bits
            )
        if job.kind == JobKind.GET_CATEGORIES:
            return list(PLACEHOLDER_CATEGORIES)
        msg = f'Unknown job kind {job.kind}'
        raise InternalError(msg)

    async def _forward_geocode(self, job: Job) -> list:
        gate = self.context.gate
        if not gate.do_not_connect:
            await gate.ensure_connected()
        if not gate.may_attempt(strict=job.kind.verbose):
            msg = 'Network not available for forward geocoding'
            raise ConnectivityFailure(msg)
        return await self.context.geocoder.forward(job.payload.url)

    async def _reverse_geocode(self, job: Job) -> list:
        ctx = self.context
        coordinate = job.payload.coordinate
        cached = ctx.geocode_cache.lookup(coordinate)
        if cached is not None:
            logger.debug('Reverse geocode cache hit for job %d', job.token)
            return [cached]

        gate = ctx.gate
        if gate.do_not_connect:
            msg = 'Connection attempts suspended'
            raise ConnectivityFailure(msg)
        await gate.ensure_connected()
        if not gate.may_attempt(strict=job.kind.verbose):
            msg = 'Network not available for reverse geocoding'
            raise ConnectivityFailure(msg)

        address = await ctx.geocoder.reverse(coordinate)
        ctx.geocode_cache.insert(coordinate, address)
        return [address]
