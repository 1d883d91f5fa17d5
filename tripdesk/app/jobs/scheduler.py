"""Deferred job scheduling.

Jobs are identified by name and carry only a trip id; handlers re-read
whatever state they need from the record store when they run.
"""

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)

GENERATE_ITINERARY_JOB = "generate_itinerary"

JobHandler = Callable[[str], Awaitable[Any]]
CancelHandler = Callable[[str], Any]


@dataclass(frozen=True)
class DeferredJob:
    """A scheduled unit of work."""

    job_name: str
    trip_id: str
    delay_seconds: float


class JobScheduler(Protocol):
    """Scheduler for deferred, fire-and-forget jobs."""

    def register(
        self, job_name: str, handler: JobHandler, on_cancel: CancelHandler | None = None
    ) -> None:
        """Register the handler run for ``job_name``.

        ``on_cancel`` is called with the trip id of a job dropped before it
        started, so the job's subject is not left half-done.
        """
        ...

    def schedule(self, delay_seconds: float, job_name: str, trip_id: str) -> None:
        """Schedule ``job_name`` to run for ``trip_id`` after a delay.

        Returns immediately; the caller never waits on the job.
        """
        ...


async def _run_job(handler: JobHandler, job: DeferredJob) -> None:
    try:
        await handler(job.trip_id)
    except Exception:
        logger.exception(
            f"Deferred job failed: {job.job_name}",
            extra={"structured": {"job": job.job_name, "trip_id": job.trip_id}},
        )


class AsyncioJobScheduler:
    """Runs jobs as asyncio tasks on the running event loop."""

    def __init__(self) -> None:
        self._handlers: dict[str, JobHandler] = {}
        self._cancel_handlers: dict[str, CancelHandler] = {}
        self._timers: dict[int, tuple[asyncio.TimerHandle, DeferredJob]] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._ids = itertools.count()

    def register(
        self, job_name: str, handler: JobHandler, on_cancel: CancelHandler | None = None
    ) -> None:
        """Register the handler run for ``job_name``."""
        self._handlers[job_name] = handler
        if on_cancel is not None:
            self._cancel_handlers[job_name] = on_cancel

    def schedule(self, delay_seconds: float, job_name: str, trip_id: str) -> None:
        """Arm a timer that starts the job as a detached task.

        Must be called from within a running event loop.
        """
        if job_name not in self._handlers:
            raise ValueError(f"No handler registered for job {job_name!r}")

        job = DeferredJob(job_name=job_name, trip_id=trip_id, delay_seconds=delay_seconds)
        job_id = next(self._ids)
        loop = asyncio.get_running_loop()
        handle = loop.call_later(max(0.0, delay_seconds), self._start, job_id, job)
        self._timers[job_id] = (handle, job)

        logger.info(
            f"Scheduled job: {job_name}",
            extra={"structured": {"job": job_name, "trip_id": trip_id, "delay_s": delay_seconds}},
        )

    def _start(self, job_id: int, job: DeferredJob) -> None:
        self._timers.pop(job_id, None)
        task = asyncio.get_running_loop().create_task(_run_job(self._handlers[job.job_name], job))
        # Hold a reference until the task finishes
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        """Jobs armed or running."""
        return len(self._timers) + len(self._tasks)

    async def drain(self) -> None:
        """Wait for all running tasks to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def shutdown(self) -> None:
        """Cancel armed timers and running tasks.

        Armed jobs are handed to their cancel handler. Running tasks see
        ``CancelledError`` and are awaited until they unwind.
        """
        armed = list(self._timers.values())
        self._timers.clear()

        for handle, job in armed:
            handle.cancel()
            on_cancel = self._cancel_handlers.get(job.job_name)
            if on_cancel is None:
                continue
            try:
                on_cancel(job.trip_id)
            except Exception:
                logger.exception(
                    f"Cancel handler failed: {job.job_name}",
                    extra={"structured": {"job": job.job_name, "trip_id": job.trip_id}},
                )

        running = list(self._tasks)
        for task in running:
            task.cancel()
        await asyncio.gather(*running, return_exceptions=True)


class RecordingScheduler:
    """Collects jobs and runs them only when asked.

    Delays are recorded but not waited for.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, JobHandler] = {}
        self._cancel_handlers: dict[str, CancelHandler] = {}
        self.jobs: list[DeferredJob] = []

    def register(
        self, job_name: str, handler: JobHandler, on_cancel: CancelHandler | None = None
    ) -> None:
        """Register the handler run for ``job_name``."""
        self._handlers[job_name] = handler
        if on_cancel is not None:
            self._cancel_handlers[job_name] = on_cancel

    def schedule(self, delay_seconds: float, job_name: str, trip_id: str) -> None:
        """Record the job."""
        self.jobs.append(
            DeferredJob(job_name=job_name, trip_id=trip_id, delay_seconds=delay_seconds)
        )

    async def run_pending(self) -> int:
        """Run recorded jobs in scheduling order.

        Returns:
            Number of jobs run
        """
        count = 0
        while self.jobs:
            job = self.jobs.pop(0)
            await _run_job(self._handlers[job.job_name], job)
            count += 1
        return count

    def cancel_pending(self) -> int:
        """Drop recorded jobs, passing each to its cancel handler.

        Returns:
            Number of jobs dropped
        """
        dropped = self.jobs
        self.jobs = []
        for job in dropped:
            on_cancel = self._cancel_handlers.get(job.job_name)
            if on_cancel is not None:
                on_cancel(job.trip_id)
        return len(dropped)
