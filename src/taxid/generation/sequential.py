"""Single-threaded bulk generation of unique identifiers."""

from __future__ import annotations

import logging
import random
import time

from taxid.core.exceptions import SinkWriteError
from taxid.core.protocols import IIdentifierSink
from taxid.generation.partition import ensure_capacity
from taxid.models.generation import GenerationJob, GenerationMode, GenerationReport
from taxid.models.identifier import TaxIdentifier

logger = logging.getLogger(__name__)


def write_identifier(sink: IIdentifierSink, identifier: TaxIdentifier) -> None:
    try:
        sink.write(identifier)
    except SinkWriteError:
        raise
    except Exception as exc:
        raise SinkWriteError(f"Sink write failed for {identifier}: {exc}") from exc


def flush_sink(sink: IIdentifierSink) -> None:
    try:
        sink.flush()
    except SinkWriteError:
        raise
    except Exception as exc:
        raise SinkWriteError(f"Sink flush failed: {exc}") from exc


def generate_unique_set(
    count: int,
    sink: IIdentifierSink,
    *,
    seed: int | None = None,
) -> GenerationReport:
    """Write ``count`` distinct random identifiers to ``sink``.

    Values are written in the order they are first drawn; with ``seed`` set the
    output is reproducible. Repeated draws are dropped without being reported
    as errors.

    Raises:
        ValueError: ``count`` is negative.
        GenerationCapacityError: ``count`` exceeds what the generator can reach.
        SinkWriteError: the sink failed; whatever was written stays written.
    """
    job = GenerationJob(count=count, worker_count=1, seed=seed)
    ensure_capacity(job.count)
    rng = random.Random(job.seed) if job.seed is not None else None

    logger.info("Generating %d identifiers (sequential)", job.count)
    started = time.perf_counter()
    seen: set[tuple[int, ...]] = set()
    duplicates = 0
    while len(seen) < job.count:
        identifier = TaxIdentifier.random(rng)
        if identifier.digits in seen:
            duplicates += 1
            continue
        seen.add(identifier.digits)
        write_identifier(sink, identifier)
    flush_sink(sink)

    report = GenerationReport(
        mode=GenerationMode.SEQUENTIAL,
        requested=job.count,
        written=len(seen),
        duplicates=duplicates,
        elapsed_ms=int((time.perf_counter() - started) * 1000),
    )
    logger.info(
        "Done: %d identifiers in %d ms (%d duplicates discarded)",
        report.written, report.elapsed_ms, report.duplicates,
    )
    return report
