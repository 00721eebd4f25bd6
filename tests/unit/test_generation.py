"""Tests for sequential and concurrent unique-set generation."""

from __future__ import annotations

import threading

import pytest

from taxid.core.exceptions import GenerationCapacityError, GenerationError, SinkWriteError
from taxid.generation.concurrent import generate_unique_set_concurrent
from taxid.generation.partition import ensure_capacity, partition_leading_digits, split_shares
from taxid.generation.sequential import generate_unique_set
from taxid.models.generation import GenerationMode
from taxid.models.identifier import TaxIdentifier, is_valid
from tests.fakes import FailingSink, MemorySink, ThreadRecordingSink


@pytest.fixture
def sink():
    return MemorySink()


def _assert_unique_valid(sink: MemorySink, count: int) -> None:
    lines = sink.lines
    assert len(lines) == count
    assert len(set(lines)) == count
    assert all(len(line) == 11 and line.isdigit() for line in lines)
    assert all(is_valid(line) for line in lines)


class TestPartition:
    def test_nine_workers_own_one_digit_each(self):
        assert partition_leading_digits(9) == [frozenset({d}) for d in range(1, 10)]

    def test_fewer_workers_cover_all_digits_disjointly(self):
        parts = partition_leading_digits(4)
        assert parts[0] == frozenset({1, 5, 9})
        assert sorted(d for part in parts for d in part) == list(range(1, 10))

    def test_single_worker_owns_everything(self):
        assert partition_leading_digits(1) == [frozenset(range(1, 10))]

    def test_worker_count_bounds(self):
        with pytest.raises(ValueError):
            partition_leading_digits(0)
        with pytest.raises(ValueError):
            partition_leading_digits(10)

    def test_shares_sum_to_count(self):
        assert split_shares(10, 9) == [2, 1, 1, 1, 1, 1, 1, 1, 1]
        assert split_shares(0, 9) == [0] * 9
        assert sum(split_shares(10_000, 9)) == 10_000

    def test_negative_share_count(self):
        with pytest.raises(ValueError):
            split_shares(-1, 9)

    def test_capacity_guard(self):
        ensure_capacity(16_329_600, frozenset({3}))
        with pytest.raises(GenerationCapacityError) as excinfo:
            ensure_capacity(16_329_601, frozenset({3}))
        assert excinfo.value.capacity == 16_329_600


class TestSequential:
    @pytest.mark.parametrize("count", [0, 1, 10, 10_000])
    def test_delivers_exactly_count_unique(self, sink, count):
        report = generate_unique_set(count, sink)
        _assert_unique_valid(sink, count)
        assert report.mode == GenerationMode.SEQUENTIAL
        assert report.written == count
        assert sink.flush_count == 1

    def test_seed_makes_output_reproducible(self):
        first, second = MemorySink(), MemorySink()
        generate_unique_set(50, first, seed=7)
        generate_unique_set(50, second, seed=7)
        assert first.lines == second.lines

    def test_unseeded_runs_differ(self):
        first, second = MemorySink(), MemorySink()
        generate_unique_set(100, first)
        generate_unique_set(100, second)
        assert first.lines != second.lines

    def test_negative_count_rejected(self, sink):
        with pytest.raises(ValueError):
            generate_unique_set(-1, sink)

    def test_count_above_capacity_rejected(self, sink):
        with pytest.raises(GenerationCapacityError):
            generate_unique_set(146_966_401, sink)
        assert len(sink) == 0

    def test_sink_failure_is_fatal(self):
        sink = FailingSink(fail_after=5)
        with pytest.raises(SinkWriteError) as excinfo:
            generate_unique_set(20, sink)
        assert isinstance(excinfo.value.__cause__, OSError)
        assert len(sink) == 5


class TestConcurrent:
    @pytest.mark.parametrize("count", [0, 1, 10, 10_000])
    def test_delivers_exactly_count_unique(self, sink, count):
        report = generate_unique_set_concurrent(count, sink)
        _assert_unique_valid(sink, count)
        assert report.mode == GenerationMode.CONCURRENT
        assert report.written == count
        assert len(report.workers) == 9

    def test_each_worker_fills_its_leading_digit(self, sink):
        report = generate_unique_set_concurrent(90, sink)
        leading = [line[0] for line in sink.lines]
        for digit in "123456789":
            assert leading.count(digit) == 10
        for stats in report.workers:
            assert stats.leading_digits == [stats.tag]
            assert stats.produced == stats.share == 10

    def test_only_writer_thread_touches_sink(self):
        sink = ThreadRecordingSink()
        generate_unique_set_concurrent(200, sink)
        assert sink.writer_threads == {"taxid-writer"}

    def test_fewer_workers(self, sink):
        report = generate_unique_set_concurrent(500, sink, worker_count=3)
        _assert_unique_valid(sink, 500)
        assert [w.leading_digits for w in report.workers] == [[1, 4, 7], [2, 5, 8], [3, 6, 9]]

    def test_bounded_queue(self, sink):
        generate_unique_set_concurrent(1_000, sink, queue_maxsize=4)
        _assert_unique_valid(sink, 1_000)

    def test_partition_rejections_counted(self, sink):
        report = generate_unique_set_concurrent(900, sink)
        assert report.partition_rejections > 0
        assert report.draws >= 900

    def test_sink_failure_is_fatal(self):
        sink = FailingSink(fail_after=10)
        with pytest.raises(SinkWriteError):
            generate_unique_set_concurrent(5_000, sink, queue_maxsize=2)
        assert len(sink) == 10
        assert sink.writer_threads == {"taxid-writer"}

    def test_invalid_worker_count(self, sink):
        with pytest.raises(ValueError):
            generate_unique_set_concurrent(10, sink, worker_count=10)

    def test_negative_count_rejected(self, sink):
        with pytest.raises(ValueError):
            generate_unique_set_concurrent(-5, sink)

    def test_share_above_partition_capacity_rejected(self, sink):
        with pytest.raises(GenerationCapacityError):
            generate_unique_set_concurrent(16_329_601 * 9, sink)
        assert len(sink) == 0


class _BrokenRandom:
    """Stands in for TaxIdentifier: draws normally, then raises after ``limit`` draws."""

    def __init__(self, limit: int) -> None:
        self._limit = limit
        self._draws = 0
        self._lock = threading.Lock()

    def random(self, rng=None):
        with self._lock:
            self._draws += 1
            if self._draws > self._limit:
                raise RuntimeError("rng broke")
        return TaxIdentifier.random(rng)


class TestConcurrentProducerFailure:
    def test_producer_error_raised_as_generation_error(self, monkeypatch, sink):
        monkeypatch.setattr("taxid.generation.concurrent.TaxIdentifier", _BrokenRandom(limit=50))
        outcome: dict[str, BaseException] = {}

        def run():
            try:
                generate_unique_set_concurrent(5_000, sink, queue_maxsize=2)
            except BaseException as exc:
                outcome["error"] = exc

        runner = threading.Thread(target=run, daemon=True)
        runner.start()
        runner.join(timeout=30)

        assert not runner.is_alive(), "generation did not terminate"
        error = outcome["error"]
        assert isinstance(error, GenerationError)
        assert not isinstance(error, SinkWriteError)
        assert isinstance(error.__cause__, RuntimeError)
        assert "rng broke" in str(error)
        assert len(sink) < 5_000
        assert len(set(sink.lines)) == len(sink)
