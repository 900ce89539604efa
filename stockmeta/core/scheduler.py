"""
Concurrency-bounded scheduler.

Keeps up to `concurrency` analysis calls in flight and drains the store's
queue without external polling. Admission happens in tick(), which is
synchronous. Each admitted job runs as its own asyncio task; when that task
settles, a done-callback dispatched by the event loop applies the terminal
transition and ticks again to backfill the freed slot.

Dependencies: asyncio, stockmeta.core.job_store, stockmeta.boundary.gemini
System role: Job runner driving the analysis client
"""

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Callable

from stockmeta.core.exceptions import AnalysisError, StockMetaException, ValidationError
from stockmeta.core.job import Job, JobStatus
from stockmeta.core.job_store import JobStore
from stockmeta.models.analysis import AnalysisResult
from stockmeta.observability.log_utils import log_with_context

if TYPE_CHECKING:
    from stockmeta.boundary.gemini.analysis_client import AnalysisClient

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 3


def describe_failure(exc: BaseException) -> str:
    """Human-readable failure reason stored on a FAILED job."""
    if isinstance(exc, StockMetaException):
        return exc.message
    return str(exc) or "Unknown error"


class Scheduler:
    """
    Admits pending jobs to the analysis client under a fixed ceiling.

    Must be driven from a running event loop. tick() never suspends, so
    admission and the in-flight increment are a single step with respect to
    any other tick() on the same loop.
    """

    def __init__(
        self,
        store: JobStore,
        client: "AnalysisClient",
        concurrency: int = DEFAULT_CONCURRENCY,
        analysis_timeout: float | None = None,
        on_drained: Callable[[], None] | None = None,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            store: Job store this scheduler drives
            client: Analysis client called once per admitted job
            concurrency: Maximum jobs in flight at once (>= 1)
            analysis_timeout: Fail a call after this many seconds (None waits forever)
            on_drained: Called once each time a run empties queue and in-flight set

        Raises:
            ValidationError: concurrency below 1 or non-positive timeout
        """
        if concurrency < 1:
            raise ValidationError("concurrency must be at least 1", field="concurrency")
        if analysis_timeout is not None and analysis_timeout <= 0:
            raise ValidationError("analysis_timeout must be positive", field="analysis_timeout")

        self._store = store
        self._client = client
        self._concurrency = concurrency
        self._analysis_timeout = analysis_timeout
        self._on_drained = on_drained
        self._running = False
        self._closing = False
        self._tasks: set[asyncio.Task] = set()
        self._drained_event = asyncio.Event()
        self._drained_event.set()

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def store(self) -> JobStore:
        return self._store

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_drained(self) -> bool:
        return self._store.in_flight_count == 0 and self._store.pending_count == 0

    @property
    def outstanding_calls(self) -> int:
        """Analysis tasks not yet settled, including ones orphaned by clear()."""
        return len(self._tasks)

    def start(self) -> list[Job]:
        """Mark the scheduler running and admit as much work as fits."""
        if self._closing or self.is_drained:
            return []
        if not self._running:
            logger.info(
                f"{__name__}:start - pending={self._store.pending_count} "
                f"concurrency={self._concurrency}"
            )
        self._running = True
        self._drained_event.clear()
        return self.tick()

    def tick(self) -> list[Job]:
        """
        Admit pending jobs while below the ceiling.

        Idempotent: with no free slot or no pending job it admits nothing.
        Admits nothing once aclose() has begun.

        Returns:
            list[Job]: Jobs admitted by this call, in FIFO order
        """
        if self._closing:
            return []

        admitted = []
        while self._store.in_flight_count < self._concurrency:
            job = self._store.admit_next()
            if job is None:
                break
            self._dispatch(job)
            admitted.append(job)

        if admitted:
            logger.debug(
                f"{__name__}:tick - admitted={len(admitted)} "
                f"in_flight={self._store.in_flight_count} pending={self._store.pending_count}"
            )
        self._check_drained()
        return admitted

    def reset(self) -> None:
        """Forget run state after the store has been cleared."""
        self._running = False
        self._check_drained()

    async def wait_drained(self) -> None:
        """
        Suspend until the queue is empty and nothing is in flight.

        Pending jobs that were never started keep this waiting; call start()
        or tick() first.
        """
        while not self.is_drained:
            self._drained_event.clear()
            await self._drained_event.wait()

    async def aclose(self, grace: float | None = None) -> None:
        """
        Stop admitting work and settle every outstanding analysis call.

        Calls still running after `grace` seconds (immediately when None)
        are cancelled; their live jobs fail with "Analysis cancelled".
        Pending jobs stay PENDING.

        Args:
            grace: Seconds to let outstanding calls finish before cancelling
        """
        self._closing = True
        self._running = False
        if not self._tasks:
            return

        logger.info(f"{__name__}:aclose - outstanding={len(self._tasks)} grace={grace}")
        if grace:
            await asyncio.wait(list(self._tasks), timeout=grace)
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _dispatch(self, job: Job) -> None:
        task = asyncio.get_running_loop().create_task(
            self._analyze(job.payload, job.mime_type),
            name=f"analyze-{job.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(
            functools.partial(self._on_settled, job.id, self._store.generation)
        )

    async def _analyze(self, payload: bytes, mime_type: str) -> AnalysisResult:
        call = self._client.analyze(payload, mime_type)
        if self._analysis_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._analysis_timeout)
        except asyncio.TimeoutError:
            raise AnalysisError(
                f"Analysis timed out after {self._analysis_timeout:g}s"
            ) from None

    def _on_settled(self, job_id: str, generation: int, task: asyncio.Task) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            outcome: AnalysisResult | BaseException = AnalysisError("Analysis cancelled")
        else:
            outcome = task.exception() or task.result()
        if not isinstance(outcome, (AnalysisResult, BaseException)):
            outcome = AnalysisError(
                f"Analysis client returned {type(outcome).__name__}, expected AnalysisResult"
            )

        if not self._is_live(job_id, generation):
            log_with_context(
                logger,
                logging.DEBUG,
                f"{__name__}:_on_settled - discarding stale settlement",
                job_id=job_id,
                generation=generation,
            )
            self._check_drained()
            return

        if isinstance(outcome, BaseException):
            reason = describe_failure(outcome)
            self._store.transition(job_id, JobStatus.FAILED, reason)
            log_with_context(
                logger,
                logging.WARNING,
                f"{__name__}:_on_settled - job failed",
                job_id=job_id,
                error_type=type(outcome).__name__,
                reason=reason,
            )
        else:
            self._store.transition(job_id, JobStatus.COMPLETED, outcome)
            log_with_context(
                logger,
                logging.INFO,
                f"{__name__}:_on_settled - job completed",
                job_id=job_id,
                tags=outcome.tags,
            )

        self.tick()

    def _is_live(self, job_id: str, generation: int) -> bool:
        if generation != self._store.generation or job_id not in self._store:
            return False
        return self._store.get(job_id).status is JobStatus.IN_FLIGHT

    def _check_drained(self) -> None:
        if not self.is_drained:
            return
        self._drained_event.set()
        if self._running:
            self._running = False
            logger.info(f"{__name__}:_check_drained - queue drained total={len(self._store)}")
            if self._on_drained is not None:
                self._on_drained()
