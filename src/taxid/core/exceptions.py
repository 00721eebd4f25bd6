"""taxid exception hierarchy."""

from __future__ import annotations

from enum import StrEnum


class TaxIdError(Exception):
    """Base exception for all taxid errors."""


class ValidationReason(StrEnum):
    INVALID_LENGTH = "INVALID_LENGTH"
    LEADING_ZERO = "LEADING_ZERO"
    DIGIT_OUT_OF_RANGE = "DIGIT_OUT_OF_RANGE"
    INVALID_DISTRIBUTION = "INVALID_DISTRIBUTION"
    INVALID_CHECKSUM = "INVALID_CHECKSUM"


class IdentifierValidationError(TaxIdError):
    """A candidate digit sequence is not a valid identifier.

    Exactly one reason is reported per failed validation; subclasses carry the
    details relevant to their reason.
    """

    reason: ValidationReason


class InvalidLengthError(IdentifierValidationError):
    """Candidate does not hold exactly 11 entries."""

    reason = ValidationReason.INVALID_LENGTH

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"Identifier must have 11 digits, got {length}")


class LeadingZeroError(IdentifierValidationError):
    """First digit is zero."""

    reason = ValidationReason.LEADING_ZERO

    def __init__(self) -> None:
        super().__init__("Identifier must not start with 0")


class DigitOutOfRangeError(IdentifierValidationError):
    """A body entry is not a single decimal digit."""

    reason = ValidationReason.DIGIT_OUT_OF_RANGE

    def __init__(self, position: int, value: object) -> None:
        self.position = position
        self.value = value
        super().__init__(f"Digit at position {position} is out of range 0-9: {value!r}")


class InvalidDistributionError(IdentifierValidationError):
    """Digit occurrence profile of the body is not one of the allowed shapes."""

    reason = ValidationReason.INVALID_DISTRIBUTION

    def __init__(self, profile: tuple[int, int, int, int]) -> None:
        self.profile = profile
        super().__init__(f"Invalid digit distribution in body: profile {profile}")


class InvalidChecksumError(IdentifierValidationError):
    """Check digit does not match the body."""

    reason = ValidationReason.INVALID_CHECKSUM

    def __init__(self, expected: int, actual: object) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Check digit mismatch: expected {expected}, got {actual!r}")


class GenerationError(TaxIdError):
    """Bulk generation run failed."""


class GenerationCapacityError(GenerationError):
    """Requested count exceeds the number of distinct identifiers reachable."""

    def __init__(self, requested: int, capacity: int, scope: str = "generator") -> None:
        self.requested = requested
        self.capacity = capacity
        self.scope = scope
        super().__init__(
            f"Cannot produce {requested} unique identifiers: {scope} capacity is {capacity}"
        )


class SinkWriteError(GenerationError):
    """Writing to the output sink failed; the run is aborted."""
