"""Generation job parameters and run report models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

MAX_WORKERS = 9  # one per non-zero leading digit


class GenerationMode(StrEnum):
    SEQUENTIAL = "SEQUENTIAL"
    CONCURRENT = "CONCURRENT"


class GenerationJob(BaseModel):
    """Parameters of a single bulk generation run."""

    count: int = Field(ge=0)
    worker_count: int = Field(default=MAX_WORKERS, ge=1, le=MAX_WORKERS)
    queue_maxsize: int = Field(default=0, ge=0)
    seed: int | None = None


class WorkerStats(BaseModel):
    """Counters owned by one producer; read only after the producer has exited."""

    tag: int
    leading_digits: list[int] = Field(default_factory=list)
    share: int = 0
    produced: int = 0
    duplicates: int = 0
    partition_rejections: int = 0


class GenerationReport(BaseModel):
    """Outcome of a completed generation run."""

    mode: GenerationMode
    requested: int
    written: int = 0
    duplicates: int = 0  # repeated draws discarded silently
    partition_rejections: int = 0  # draws outside a worker's leading digits
    elapsed_ms: int = 0
    workers: list[WorkerStats] = Field(default_factory=list)

    @property
    def draws(self) -> int:
        """Total number of identifiers sampled during the run."""
        produced = sum(w.produced for w in self.workers) if self.workers else self.written
        return produced + self.duplicates + self.partition_rejections
