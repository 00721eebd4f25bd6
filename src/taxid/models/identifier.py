"""Tax identifier model: 11 digits, a distribution rule and a check digit.

The first ten digits form the body, the eleventh is the check digit. A body is
accepted when no value leads with 0 and exactly one value repeats, either twice
(one value absent) or three times (two values absent).
"""

from __future__ import annotations

import random as _random
from collections import Counter
from collections.abc import Sequence
from math import factorial
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from taxid.core.exceptions import (
    DigitOutOfRangeError,
    IdentifierValidationError,
    InvalidChecksumError,
    InvalidDistributionError,
    InvalidLengthError,
    LeadingZeroError,
)
from taxid.core.types import DigitProfile, Digits

IDENTIFIER_LENGTH = 11
BODY_LENGTH = 10

# Occurrence profiles: (values seen 0x, 1x, 2x, 3+x) across the body.
PROFILE_ONE_PAIR: DigitProfile = (1, 8, 1, 0)
PROFILE_ONE_TRIPLE: DigitProfile = (2, 7, 0, 1)
ALLOWED_PROFILES: frozenset[DigitProfile] = frozenset({PROFILE_ONE_PAIR, PROFILE_ONE_TRIPLE})

_CANONICAL_BODY: Digits = (1, 2, 3, 4, 5, 6, 7, 8, 9, 0)

# Distinct bodies reachable by TaxIdentifier.random(): repeated value x absent
# value x arrangements of a multiset with one pair. Leading digits 1-9 share it
# evenly; bodies starting with 0 are rejected.
_PAIR_BODIES = 10 * 9 * (factorial(BODY_LENGTH) // 2)
_CAPACITY_PER_LEADING_DIGIT = _PAIR_BODIES // 10


def check_digit(body: Sequence[int]) -> int:
    """Compute the check digit over a 10-digit body.

    Running product checksum modulo 11 with a zero-to-ten wrap on the sum.
    Digit order matters.
    """
    if len(body) != BODY_LENGTH:
        raise ValueError(f"Body must have {BODY_LENGTH} digits, got {len(body)}")
    product = 10
    for digit in body:
        total = (digit + product) % 10
        if total == 0:
            total = 10
        product = (total * 2) % 11
    result = 11 - product
    return 0 if result == 10 else result


def digit_profile(body: Sequence[int]) -> DigitProfile:
    """Count how many of the values 0-9 occur 0, 1, 2 and 3+ times in ``body``."""
    counts = Counter(body)
    profile = [0, 0, 0, 0]
    for value in range(10):
        profile[min(counts[value], 3)] += 1
    return profile[0], profile[1], profile[2], profile[3]


def generator_capacity(leading_digit: Optional[int] = None) -> int:
    """Number of distinct identifiers ``TaxIdentifier.random()`` can produce.

    With ``leading_digit`` given, only identifiers starting with it are counted.
    """
    if leading_digit is None:
        return _CAPACITY_PER_LEADING_DIGIT * 9
    if not 0 <= leading_digit <= 9:
        raise ValueError(f"leading_digit must be 0-9, got {leading_digit}")
    return 0 if leading_digit == 0 else _CAPACITY_PER_LEADING_DIGIT


def _is_digit(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 9


def _digits_from_text(text: str) -> list[Any]:
    # Non-digit characters are kept as-is so the range check can report them.
    return [int(ch) if ch in "0123456789" else ch for ch in text.strip()]


def validation_error(sequence: Sequence[Any]) -> Optional[IdentifierValidationError]:
    """Return the highest-priority validation failure, or None when valid.

    Checks run in order: length, leading zero, body digit range, distribution,
    checksum.
    """
    if isinstance(sequence, str):
        sequence = _digits_from_text(sequence)
    if len(sequence) != IDENTIFIER_LENGTH:
        return InvalidLengthError(len(sequence))
    if sequence[0] == 0:
        return LeadingZeroError()
    body = sequence[:BODY_LENGTH]
    for position, value in enumerate(body):
        if not _is_digit(value):
            return DigitOutOfRangeError(position, value)
    profile = digit_profile(body)
    if profile not in ALLOWED_PROFILES:
        return InvalidDistributionError(profile)
    expected = check_digit(body)
    actual = sequence[BODY_LENGTH]
    if not _is_digit(actual) or actual != expected:
        return InvalidChecksumError(expected, actual)
    return None


class TaxIdentifier(BaseModel):
    """Immutable, always-valid 11-digit tax identifier."""

    model_config = {"frozen": True}

    digits: Digits

    @field_validator("digits", mode="before")
    @classmethod
    def reject_invalid_digits(cls, value: Any) -> Digits:
        error = validation_error(value)
        if error is not None:
            raise error
        if isinstance(value, str):
            return tuple(int(ch) for ch in value.strip())
        return tuple(value)

    def __str__(self) -> str:
        return "".join(map(str, self.digits))

    @property
    def body(self) -> Digits:
        return self.digits[:BODY_LENGTH]

    @property
    def check(self) -> int:
        return self.digits[BODY_LENGTH]

    @property
    def leading_digit(self) -> int:
        return self.digits[0]

    @property
    def profile(self) -> DigitProfile:
        return digit_profile(self.body)

    @classmethod
    def from_digits(cls, sequence: Sequence[int]) -> TaxIdentifier:
        """Validate ``sequence`` and wrap it; raises IdentifierValidationError."""
        return cls(digits=sequence)

    @classmethod
    def parse(cls, text: str) -> TaxIdentifier:
        """Parse an 11-character digit string such as ``"10374918258"``."""
        return cls(digits=text)

    @classmethod
    def random(cls, rng: Optional[_random.Random] = None) -> TaxIdentifier:
        """Build a random valid identifier.

        One body slot is overwritten with the value of another, so exactly one
        value appears twice and one is missing. The body is then shuffled until
        it does not lead with 0 and the check digit is appended.
        """
        source = rng if rng is not None else _random
        body = list(_CANONICAL_BODY)
        target, donor = source.sample(range(BODY_LENGTH), 2)
        body[target] = body[donor]
        source.shuffle(body)
        while body[0] == 0:
            source.shuffle(body)
        body.append(check_digit(body))
        # Valid by construction; skip re-validation on the hot path.
        return cls.model_construct(digits=tuple(body))


def validate(sequence: Sequence[Any]) -> TaxIdentifier:
    """Validate an 11-entry digit sequence (or digit string) into a TaxIdentifier."""
    return TaxIdentifier.from_digits(sequence)


def is_valid(sequence: Sequence[Any]) -> bool:
    return validation_error(sequence) is None
