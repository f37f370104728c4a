"""
Tests for ParserPool: bounded workers, queueing, idle reclaim, lifecycle.
"""

import threading
import time

import pytest

from inventory_kernel.exceptions import (
    CsvParseError,
    ParserPoolNotRunningError,
    ParseTimeoutError,
)

from inventory_ingestion.domain.types import ParseOutcome
from inventory_ingestion.workers import ParserPool, parse_and_validate


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class _Gate:
    """Task that blocks until released; counts concurrent runs."""

    def __init__(self):
        self.release = threading.Event()
        self._lock = threading.Lock()
        self.running = 0
        self.peak = 0

    def __call__(self, value):
        with self._lock:
            self.running += 1
            self.peak = max(self.peak, self.running)
        try:
            self.release.wait(timeout=10)
            return value
        finally:
            with self._lock:
                self.running -= 1


class TestParseAndValidate:
    def test_partitions_valid_and_invalid(self):
        text = (
            "store_name,book_name,author_name,price\n"
            "S,B1,A,10\n"
            "S,,A,10\n"
            "S,B3,A,abc\n"
            "S,B4,A,1.50\n"
        )
        outcome = parse_and_validate(text)
        assert outcome.total_parsed == 4
        assert [v.ordinal for v in outcome.valid_rows] == [2, 5]
        assert [e.ordinal for e in outcome.errors] == [3, 4]
        assert outcome.errors[0].reason == "Row 3: Missing required fields: book_name"

    def test_header_only(self):
        outcome = parse_and_validate("store_name,book_name,author_name,price\n")
        assert outcome == ParseOutcome(valid_rows=(), errors=(), total_parsed=0)

    def test_malformed_text_fails_whole_call(self):
        with pytest.raises(CsvParseError):
            parse_and_validate('store_name,book_name,author_name,price\nS,B,A,1\nS,"B2,A,1\n')


class TestParserPoolConstruction:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_workers": -1},
            {"min_workers": 3, "max_workers": 2},
            {"max_workers": 0, "min_workers": 0},
            {"idle_timeout": 0},
        ],
    )
    def test_rejects_invalid_bounds(self, kwargs):
        with pytest.raises(ValueError):
            ParserPool(**kwargs)


class TestParserPoolLifecycle:
    def test_start_spawns_min_workers(self):
        pool = ParserPool(min_workers=2, max_workers=4)
        pool.start()
        try:
            assert pool.is_running
            assert pool.stats().workers == 2
        finally:
            pool.stop()
        assert not pool.is_running
        assert pool.stats().workers == 0

    def test_start_is_idempotent(self):
        pool = ParserPool(min_workers=2, max_workers=4)
        pool.start()
        pool.start()
        try:
            assert pool.stats().workers == 2
        finally:
            pool.stop()

    def test_submit_before_start_rejected(self):
        pool = ParserPool()
        with pytest.raises(ParserPoolNotRunningError):
            pool.submit("a,b\n")

    def test_submit_after_stop_rejected(self):
        pool = ParserPool(min_workers=1, max_workers=1)
        pool.start()
        pool.stop()
        with pytest.raises(ParserPoolNotRunningError) as exc_info:
            pool.run("a,b\n")
        assert exc_info.value.code == "PARSER_POOL_NOT_RUNNING"

    def test_context_manager(self):
        with ParserPool(min_workers=1, max_workers=2) as pool:
            outcome = pool.run("store_name,book_name,author_name,price\nS,B,A,1\n")
            assert len(outcome.valid_rows) == 1
        assert not pool.is_running

    def test_stop_finishes_queued_work(self):
        gate = _Gate()
        pool = ParserPool(min_workers=1, max_workers=1, task=gate)
        pool.start()
        futures = [pool.submit(i) for i in range(3)]
        gate.release.set()
        pool.stop()
        assert [f.result(timeout=1) for f in futures] == [0, 1, 2]


class TestParserPoolWork:
    def test_run_returns_outcome(self, parser_pool):
        outcome = parser_pool.run("store_name,book_name,author_name,price\nS,B,A,1\nS,B,,1\n")
        assert outcome.total_parsed == 2
        assert len(outcome.valid_rows) == 1
        assert len(outcome.errors) == 1
        assert parser_pool.stats().completed == 1

    def test_task_errors_surface_from_run(self, parser_pool):
        with pytest.raises(CsvParseError):
            parser_pool.run('store_name\n"open\n')
        assert parser_pool.stats().failed == 1

    def test_run_timeout(self):
        gate = _Gate()
        pool = ParserPool(min_workers=1, max_workers=1, task=gate, run_timeout=0.05)
        pool.start()
        try:
            with pytest.raises(ParseTimeoutError) as exc_info:
                pool.run("x")
            assert exc_info.value.timeout_seconds == 0.05
        finally:
            gate.release.set()
            pool.stop()

    def test_grows_to_max_and_queues_beyond(self):
        gate = _Gate()
        pool = ParserPool(min_workers=1, max_workers=2, task=gate)
        pool.start()
        try:
            futures = [pool.submit(i) for i in range(4)]
            assert _wait_for(lambda: gate.running == 2)
            stats = pool.stats()
            assert stats.workers == 2
            assert stats.queued == 2
            gate.release.set()
            assert [f.result(timeout=5) for f in futures] == [0, 1, 2, 3]
            assert gate.peak == 2
        finally:
            gate.release.set()
            pool.stop()

    def test_idle_workers_above_minimum_are_reclaimed(self):
        gate = _Gate()
        pool = ParserPool(min_workers=1, max_workers=3, idle_timeout=0.1, task=gate)
        pool.start()
        try:
            futures = [pool.submit(i) for i in range(3)]
            assert _wait_for(lambda: gate.running == 3)
            assert pool.stats().workers == 3
            gate.release.set()
            for f in futures:
                f.result(timeout=5)
            assert _wait_for(lambda: pool.stats().workers == 1)
        finally:
            gate.release.set()
            pool.stop()

    def test_minimum_workers_survive_idle_timeout(self):
        pool = ParserPool(min_workers=2, max_workers=3, idle_timeout=0.05)
        pool.start()
        try:
            time.sleep(0.3)
            assert pool.stats().workers == 2
        finally:
            pool.stop()

    def test_concurrent_runs_do_not_share_results(self, parser_pool):
        texts = [
            f"store_name,book_name,author_name,price\nS{i},B,A,{i}\n" for i in range(6)
        ]
        futures = [parser_pool.submit(t) for t in texts]
        outcomes = [f.result(timeout=5) for f in futures]
        assert [o.valid_rows[0].row.store_name for o in outcomes] == [f"S{i}" for i in range(6)]
