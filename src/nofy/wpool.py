"""Bounded worker pool with separate result and error channels.

A ``Pool`` runs a fixed number of worker threads that pull ``Job`` objects
from one shared queue and apply a process function to each job's input.
Successful jobs land on the results channel, failed ones on the errors
channel; every accepted job lands on exactly one of them, or in
``Pool.dropped`` if no worker was left to run it.

Lifecycle is ``created -> started -> stopped``.  ``stop()`` refuses new
submissions, lets the workers drain every job already accepted, joins them
and then closes both channels.  Stopping is terminal.

The job queue is bounded by the workforce size, so ``submit`` applies
backpressure.  The output channels are unbounded, so stopping before
draining them cannot deadlock.

Usage::

    with Pool(3, lambda x: x * 2) as pool:
        for i in range(5):
            pool.submit(Job(input=i))
    doubled = [job.result for job in pool.collect_results()]
"""

from __future__ import annotations

import logging
import queue
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, TypeVar

from nofy.config import Settings
from nofy.defaults import POOL_POLL_INTERVAL
from nofy.errors import ConfigurationError, JobError

log = logging.getLogger("nofy.wpool")

T = TypeVar("T")
R = TypeVar("R")
J = TypeVar("J")

_CLOSED = object()


def new_job_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Job(Generic[T, R]):
    """One unit of work. ``result`` and ``error`` are mutually exclusive."""

    input: T
    id: str = field(default_factory=new_job_id)
    result: R | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Channel
# ---------------------------------------------------------------------------

class Channel(Generic[J]):
    """Unbounded closable queue. Iteration ends once the channel is closed."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Any] = queue.Queue()
        self._closed = threading.Event()

    def put(self, item: J) -> None:
        if self._closed.is_set():
            raise RuntimeError("put on closed channel")
        self._queue.put(item)

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __iter__(self) -> Iterator[J]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                # Leave the marker for any other reader.
                self._queue.put(_CLOSED)
                return
            yield item


# ---------------------------------------------------------------------------
# Worker
# ---------------------------------------------------------------------------

class Worker(Generic[T, R]):
    """Fungible executor bound to the pool's shared queue and channels."""

    def __init__(
        self,
        jobs: queue.Queue[Job[T, R]] | None,
        process: Callable[[T], R] | None,
        quit_event: threading.Event | None,
        results: Channel[Job[T, R]] | None,
        errors: Channel[Job[T, R]] | None,
        poll_interval: float = POOL_POLL_INTERVAL,
    ) -> None:
        for name, value in (
            ("job queue", jobs),
            ("process function", process),
            ("quit signal", quit_event),
            ("results channel", results),
            ("errors channel", errors),
        ):
            if value is None:
                raise ConfigurationError(f"{name} cannot be None")
        self._jobs = jobs
        self._process = process
        self._quit = quit_event
        self._results = results
        self._errors = errors
        self._poll_interval = poll_interval

    def start(self, name: str = "nofy-worker") -> threading.Thread:
        thread = threading.Thread(target=self.run, name=name, daemon=True)
        thread.start()
        return thread

    def run(self) -> None:
        """Process jobs until quit is signalled and the queue is empty."""
        while True:
            try:
                job = self._jobs.get(timeout=self._poll_interval)
            except queue.Empty:
                # No submissions are accepted once quit is set, so an empty
                # queue observed after it stays empty.
                if self._quit.is_set() and self._jobs.empty():
                    return
                continue
            self.process_job(job)

    def process_job(self, job: Job[T, R]) -> None:
        try:
            output = self._process(job.input)
        except BaseException as e:
            job.result = None
            job.error = JobError(job.id, e)
            job.error.__cause__ = e
            log.debug("Job %s failed: %s", job.id, e, extra={"job_id": job.id})
            self._errors.put(job)
            if not isinstance(e, Exception):
                # Reported, but still ends this worker.
                raise
            return
        job.result = output
        job.error = None
        self._results.put(job)


# ---------------------------------------------------------------------------
# Pool
# ---------------------------------------------------------------------------

class Pool(Generic[T, R]):
    """Fixed-size pool of worker threads sharing one bounded job queue."""

    def __init__(
        self,
        num_workers: int,
        process: Callable[[T], R] | None,
        poll_interval: float = POOL_POLL_INTERVAL,
    ) -> None:
        if process is None:
            raise ConfigurationError("process function cannot be None")
        if num_workers <= 0:
            log.debug("num_workers=%d clamped to 1", num_workers)
            num_workers = 1
        self.num_workers = num_workers
        self._process = process
        self._poll_interval = poll_interval

        self._jobs: queue.Queue[Job[T, R]] = queue.Queue(maxsize=num_workers)
        self._quit = threading.Event()
        self._results: Channel[Job[T, R]] = Channel()
        self._errors: Channel[Job[T, R]] = Channel()

        self._lock = threading.Lock()
        self._started = False
        self._stopping = False
        self._stopped = threading.Event()
        self._threads: list[threading.Thread] = []
        self.dropped: list[Job[T, R]] = []

    @classmethod
    def from_config(cls, settings: Settings, process: Callable[[T], R] | None) -> Pool[T, R]:
        return cls(settings.pool_workers, process)

    # --- Lifecycle ---

    def start(self) -> None:
        """Spawn the workers. Repeated calls, or calls after stop, do nothing."""
        with self._lock:
            if self._started or self._stopping:
                return
            self._started = True
            for i in range(self.num_workers):
                worker = Worker(
                    self._jobs, self._process, self._quit,
                    self._results, self._errors, self._poll_interval,
                )
                self._threads.append(worker.start(name=f"nofy-worker-{i}"))
        log.info("Worker pool started with %d workers", self.num_workers)

    def stop(self) -> None:
        """Drain accepted jobs, join the workers, close both channels.

        Only the first call does the work; concurrent callers wait for it.
        """
        with self._lock:
            first = not self._stopping
            self._stopping = True
            self._quit.set()
        if not first:
            self._stopped.wait()
            return

        try:
            for thread in self._threads:
                thread.join()

            while True:
                try:
                    self.dropped.append(self._jobs.get_nowait())
                except queue.Empty:
                    break
            if self.dropped and not self._started:
                log.warning(
                    "Worker pool stopped before start; %d queued jobs dropped", len(self.dropped),
                )
            elif self.dropped:
                log.warning(
                    "Workers exited before draining the queue; %d queued jobs dropped",
                    len(self.dropped),
                )

            self._results.close()
            self._errors.close()
            log.info("Worker pool stopped")
        finally:
            self._stopped.set()

    @property
    def running(self) -> bool:
        return self._started and not self._stopping

    def __enter__(self) -> Pool[T, R]:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    # --- Submission ---

    def submit(self, job: Job[T, R]) -> bool:
        """Enqueue *job*, blocking while the queue is full.

        Returns False, discarding the job, once the pool is stopping.
        """
        while True:
            with self._lock:
                if self._stopping:
                    log.debug("Pool stopping; job %s discarded", job.id, extra={"job_id": job.id})
                    return False
                try:
                    self._jobs.put_nowait(job)
                    return True
                except queue.Full:
                    pass
            self._quit.wait(self._poll_interval)

    add_task = submit

    # --- Draining ---

    def iter_results(self) -> Iterator[Job[T, R]]:
        return iter(self._results)

    def iter_errors(self) -> Iterator[Job[T, R]]:
        return iter(self._errors)

    def collect_results(self) -> list[Job[T, R]]:
        """Block until the results channel closes; return what it carried."""
        return list(self._results)

    def collect_errors(self) -> list[Job[T, R]]:
        """Block until the errors channel closes; return what it carried."""
        return list(self._errors)
