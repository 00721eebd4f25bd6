"""Protocol interfaces for taxid abstractions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from taxid.models.identifier import TaxIdentifier


@runtime_checkable
class IIdentifierSink(Protocol):
    """Destination for generated identifiers, written one at a time.

    A sink is only ever touched by a single thread during a generation run.
    """

    def write(self, identifier: TaxIdentifier) -> None: ...

    def flush(self) -> None: ...
