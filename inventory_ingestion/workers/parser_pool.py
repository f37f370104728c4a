"""
ParserPool -- bounded thread pool for CPU-bound CSV parsing.

Contract:
    ``start()`` spawns ``min_workers`` threads.  ``submit()`` queues one unit
    of work and returns a ``concurrent.futures.Future``; when every worker is
    busy and fewer than ``max_workers`` exist, one more worker is spawned,
    otherwise the work waits in the queue.  Workers above the minimum exit
    after ``idle_timeout`` seconds without work.  ``stop()`` lets queued
    work finish, then joins every worker.

Architecture: inventory_ingestion/workers.  The pool is constructed
    explicitly and injected into ImportService; there is no module-level
    pool.

Invariants enforced:
    - Never more than ``max_workers`` threads.
    - No state shared between units of work; each result travels on its
      own Future.
    - Work submitted to a pool that is not running is rejected with
      ParserPoolNotRunningError.
"""

from __future__ import annotations

import itertools
import queue
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Callable

from inventory_kernel.exceptions import (
    ParserPoolNotRunningError,
    ParseTimeoutError,
)
from inventory_kernel.logging_config import get_logger

from inventory_ingestion.domain.types import ParseOutcome
from inventory_ingestion.workers.tasks import parse_and_validate

logger = get_logger("ingestion.parser_pool")


@dataclass(frozen=True)
class PoolStats:
    """Point-in-time snapshot of the pool."""

    workers: int
    idle: int
    queued: int
    completed: int
    failed: int

    def to_dict(self) -> dict[str, int]:
        return {
            "workers": self.workers,
            "idle": self.idle,
            "queued": self.queued,
            "completed": self.completed,
            "failed": self.failed,
        }


@dataclass(frozen=True)
class _WorkItem:
    future: Future
    args: tuple[Any, ...]


class ParserPool:
    """Bounded, self-shrinking worker pool.

    Contract:
        - ``run(raw_text)`` parses one upload and waits for the outcome.
        - ``submit(*args)`` for callers that want the Future.
        - Usable as a context manager (start on enter, stop on exit).

    Non-goals:
        - NOT a process pool; parsing runs in threads of this process.
        - Does NOT cancel a unit of work that has already started.
    """

    def __init__(
        self,
        min_workers: int = 2,
        max_workers: int = 4,
        idle_timeout: float = 30.0,
        run_timeout: float | None = None,
        task: Callable[..., Any] = parse_and_validate,
        name: str = "csv-parser",
    ):
        if min_workers < 0:
            raise ValueError("min_workers must be >= 0")
        if max_workers < 1 or max_workers < min_workers:
            raise ValueError("max_workers must be >= 1 and >= min_workers")
        if idle_timeout <= 0:
            raise ValueError("idle_timeout must be positive")

        self.name = name
        self._min_workers = min_workers
        self._max_workers = max_workers
        self._idle_timeout = idle_timeout
        self._run_timeout = run_timeout
        self._task = task

        self._queue: queue.SimpleQueue[_WorkItem | None] = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._workers: set[threading.Thread] = set()
        self._counter = itertools.count(1)
        self._running = False
        self._idle = 0
        self._queued = 0
        self._completed = 0
        self._failed = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Spawn the minimum worker set. No-op if already running."""
        with self._lock:
            if self._running:
                return
            self._running = True
            for _ in range(self._min_workers):
                self._spawn_locked()

        logger.info(
            "parser_pool_started",
            extra={
                "pool": self.name,
                "min_workers": self._min_workers,
                "max_workers": self._max_workers,
                "idle_timeout": self._idle_timeout,
            },
        )

    def stop(self, timeout: float = 30.0) -> None:
        """Finish queued work, then stop and join every worker.

        Args:
            timeout: Max seconds to wait for each worker thread.
        """
        with self._lock:
            if not self._running:
                return
            self._running = False
            workers = list(self._workers)
            for _ in workers:
                self._queue.put(None)

        for worker in workers:
            worker.join(timeout=timeout)

        logger.info("parser_pool_stopped", extra={"pool": self.name, **self.stats().to_dict()})

    @property
    def is_running(self) -> bool:
        return self._running

    def __enter__(self) -> "ParserPool":
        self.start()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.stop()

    # -------------------------------------------------------------------------
    # Work submission
    # -------------------------------------------------------------------------

    def submit(self, *args: Any) -> Future:
        """Queue one unit of work.

        Raises:
            ParserPoolNotRunningError: The pool is not started or is stopped.
        """
        future: Future = Future()
        with self._lock:
            if not self._running:
                raise ParserPoolNotRunningError(self.name)
            self._queue.put(_WorkItem(future=future, args=args))
            self._queued += 1
            if self._queued > self._idle and len(self._workers) < self._max_workers:
                self._spawn_locked()
        return future

    def run(self, raw_text: str, timeout: float | None = None) -> ParseOutcome:
        """Parse one upload on the pool and wait for the outcome.

        Args:
            raw_text: Whole decoded upload.
            timeout: Seconds to wait; defaults to the pool's run_timeout
                (None waits indefinitely).

        Raises:
            ParseTimeoutError: The outcome did not arrive in time.
            CsvParseError: The text is malformed.
        """
        wait = timeout if timeout is not None else self._run_timeout
        future = self.submit(raw_text)
        try:
            return future.result(timeout=wait)
        except FutureTimeoutError:
            future.cancel()
            logger.warning("parse_timed_out", extra={"pool": self.name, "timeout": wait})
            raise ParseTimeoutError(wait) from None

    def stats(self) -> PoolStats:
        with self._lock:
            return PoolStats(
                workers=len(self._workers),
                idle=self._idle,
                queued=self._queued,
                completed=self._completed,
                failed=self._failed,
            )

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _spawn_locked(self) -> None:
        """Start one worker. Caller holds the lock."""
        worker = threading.Thread(
            target=self._worker_loop,
            name=f"{self.name}-{next(self._counter)}",
            daemon=True,
        )
        self._workers.add(worker)
        worker.start()
        logger.debug(
            "parser_worker_started",
            extra={"pool": self.name, "worker": worker.name, "workers": len(self._workers)},
        )

    def _worker_loop(self) -> None:
        me = threading.current_thread()
        while True:
            with self._lock:
                self._idle += 1
            try:
                item = self._queue.get(timeout=self._idle_timeout)
            except queue.Empty:
                with self._lock:
                    self._idle -= 1
                    if len(self._workers) > self._min_workers and self._queued == 0:
                        self._workers.discard(me)
                        remaining = len(self._workers)
                        break
                continue

            with self._lock:
                self._idle -= 1
                if item is None:
                    self._workers.discard(me)
                    return
                self._queued -= 1

            self._execute(item)

        logger.debug(
            "parser_worker_reclaimed",
            extra={"pool": self.name, "worker": me.name, "workers": remaining},
        )

    def _execute(self, item: _WorkItem) -> None:
        if not item.future.set_running_or_notify_cancel():
            return
        try:
            result = self._task(*item.args)
        except Exception as exc:
            with self._lock:
                self._failed += 1
            item.future.set_exception(exc)
        else:
            with self._lock:
                self._completed += 1
            item.future.set_result(result)
