"""Type aliases used across the taxid package."""

from __future__ import annotations

Digits = tuple[int, ...]
DigitProfile = tuple[int, int, int, int]  # values occurring 0x, 1x, 2x, 3+x
PartitionTag = int
