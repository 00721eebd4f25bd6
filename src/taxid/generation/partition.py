"""Work partitioning for concurrent generation.

Workers own disjoint sets of leading digits, so the identifiers they emit can
never collide and each worker only needs a local seen-set.
"""

from __future__ import annotations

from taxid.core.exceptions import GenerationCapacityError
from taxid.models.generation import MAX_WORKERS
from taxid.models.identifier import generator_capacity

LEADING_DIGITS = tuple(range(1, 10))


def partition_leading_digits(worker_count: int) -> list[frozenset[int]]:
    """Deal leading digits 1-9 round-robin across ``worker_count`` workers.

    With the default nine workers, worker ``k`` owns exactly digit ``k + 1``.
    """
    if not 1 <= worker_count <= MAX_WORKERS:
        raise ValueError(f"worker_count must be 1-{MAX_WORKERS}, got {worker_count}")
    return [frozenset(LEADING_DIGITS[k::worker_count]) for k in range(worker_count)]


def split_shares(count: int, worker_count: int) -> list[int]:
    """Split ``count`` into ``worker_count`` shares; the first ones take the remainder."""
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    base, extra = divmod(count, worker_count)
    return [base + (1 if k < extra else 0) for k in range(worker_count)]


def ensure_capacity(count: int, digits: frozenset[int] | None = None) -> None:
    """Raise GenerationCapacityError when ``count`` unique identifiers are unreachable."""
    if digits is None:
        capacity, scope = generator_capacity(), "generator"
    else:
        capacity = sum(generator_capacity(d) for d in digits)
        scope = f"leading digits {sorted(digits)}"
    if count > capacity:
        raise GenerationCapacityError(count, capacity, scope)
