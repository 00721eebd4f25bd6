"""Concurrent bulk generation: partitioned producers fanning in to one writer.

Each producer thread samples random identifiers, keeps only those whose leading
digit it owns, drops repeats with a local seen-set and puts new values on a
shared FIFO queue. A single writer thread drains the queue into the sink, so the
sink is never touched by more than one thread.
"""

from __future__ import annotations

import logging
import queue
import random
import threading
import time
from typing import Optional

from taxid.core.exceptions import GenerationError, SinkWriteError
from taxid.core.protocols import IIdentifierSink
from taxid.generation.partition import ensure_capacity, partition_leading_digits, split_shares
from taxid.generation.sequential import flush_sink, write_identifier
from taxid.models.generation import (
    MAX_WORKERS,
    GenerationJob,
    GenerationMode,
    GenerationReport,
    WorkerStats,
)
from taxid.models.identifier import TaxIdentifier

logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


class _Producer:
    """One partition of the run: owns its leading digits and local seen-set."""

    def __init__(
        self,
        *,
        stats: WorkerStats,
        conduit: queue.Queue,
        abort: threading.Event,
        rng: Optional[random.Random],
    ) -> None:
        self.stats = stats
        self.error: Optional[BaseException] = None
        self._digits = frozenset(stats.leading_digits)
        self._conduit = conduit
        self._abort = abort
        self._rng = rng

    def run(self) -> None:
        logger.debug("producer %d started (digits=%s, share=%d)",
                     self.stats.tag, sorted(self._digits), self.stats.share)
        seen: set[tuple[int, ...]] = set()
        duplicates = 0
        rejections = 0
        try:
            while len(seen) < self.stats.share and not self._abort.is_set():
                identifier = TaxIdentifier.random(self._rng)
                if identifier.digits[0] not in self._digits:
                    rejections += 1
                    continue
                if identifier.digits in seen:
                    duplicates += 1
                    continue
                seen.add(identifier.digits)
                self._conduit.put(identifier)
        except Exception as exc:
            logger.exception("producer %d failed", self.stats.tag)
            self.error = exc
            self._abort.set()
        finally:
            self.stats.produced = len(seen)
            self.stats.duplicates = duplicates
            self.stats.partition_rejections = rejections
            self._conduit.put(_END_OF_STREAM)
            logger.debug("producer %d stopped after %d identifiers", self.stats.tag, len(seen))


class _Writer:
    """Sole consumer of the conduit and sole owner of the sink."""

    def __init__(
        self,
        *,
        sink: IIdentifierSink,
        conduit: queue.Queue,
        abort: threading.Event,
        producer_count: int,
    ) -> None:
        self.written = 0
        self.error: Optional[SinkWriteError] = None
        self._sink = sink
        self._conduit = conduit
        self._abort = abort
        self._producer_count = producer_count

    def run(self) -> None:
        finished = 0
        while finished < self._producer_count:
            item = self._conduit.get()
            if item is _END_OF_STREAM:
                finished += 1
                continue
            if self.error is not None:
                # Keep draining so producers blocked on a bounded queue can exit.
                continue
            try:
                write_identifier(self._sink, item)
                self.written += 1
            except SinkWriteError as exc:
                logger.error("sink write failed after %d identifiers: %s", self.written, exc)
                self.error = exc
                self._abort.set()
        if self.error is None:
            try:
                flush_sink(self._sink)
            except SinkWriteError as exc:
                logger.error("sink flush failed: %s", exc)
                self.error = exc


def _producer_rng(seed: Optional[int], tag: int) -> random.Random:
    if seed is None:
        return random.Random()
    return random.Random(f"{seed}-{tag}")


def generate_unique_set_concurrent(
    count: int,
    sink: IIdentifierSink,
    *,
    worker_count: int = MAX_WORKERS,
    queue_maxsize: int = 0,
    seed: int | None = None,
) -> GenerationReport:
    """Write ``count`` distinct random identifiers to ``sink`` using worker threads.

    Leading digits 1-9 are dealt across ``worker_count`` producers, so no
    cross-worker deduplication is needed. Write order is queue arrival order and
    is not deterministic, even with ``seed`` set.

    Raises:
        ValueError: ``count`` is negative or ``worker_count`` is outside 1-9.
        GenerationCapacityError: a worker's share exceeds its partition.
        SinkWriteError: the sink failed; the run stops and the error is re-raised.
        GenerationError: a producer failed unexpectedly.
    """
    job = GenerationJob(count=count, worker_count=worker_count, queue_maxsize=queue_maxsize, seed=seed)
    partitions = partition_leading_digits(job.worker_count)
    shares = split_shares(job.count, job.worker_count)
    for digits, share in zip(partitions, shares):
        ensure_capacity(share, digits)

    conduit: queue.Queue = queue.Queue(maxsize=job.queue_maxsize)
    abort = threading.Event()
    producers = [
        _Producer(
            stats=WorkerStats(tag=k + 1, leading_digits=sorted(digits), share=share),
            conduit=conduit,
            abort=abort,
            rng=_producer_rng(job.seed, k + 1),
        )
        for k, (digits, share) in enumerate(zip(partitions, shares))
    ]
    writer = _Writer(sink=sink, conduit=conduit, abort=abort, producer_count=len(producers))

    logger.info("Generating %d identifiers (concurrent, %d workers)", job.count, job.worker_count)
    started = time.perf_counter()
    writer_thread = threading.Thread(target=writer.run, name="taxid-writer", daemon=True)
    threads = [
        threading.Thread(target=p.run, name=f"taxid-producer-{p.stats.tag}", daemon=True)
        for p in producers
    ]
    writer_thread.start()
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    writer_thread.join()
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    if writer.error is not None:
        raise writer.error
    failed = next((p for p in producers if p.error is not None), None)
    if failed is not None:
        raise GenerationError(
            f"Producer {failed.stats.tag} failed: {failed.error}"
        ) from failed.error

    report = GenerationReport(
        mode=GenerationMode.CONCURRENT,
        requested=job.count,
        written=writer.written,
        duplicates=sum(p.stats.duplicates for p in producers),
        partition_rejections=sum(p.stats.partition_rejections for p in producers),
        elapsed_ms=elapsed_ms,
        workers=[p.stats for p in producers],
    )
    logger.info(
        "Done: %d identifiers in %d ms (%d duplicates, %d partition rejections)",
        report.written, report.elapsed_ms, report.duplicates, report.partition_rejections,
    )
    return report
