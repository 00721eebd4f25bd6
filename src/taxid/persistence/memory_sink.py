"""In-memory sink for tests and embedding callers, list-backed."""

from __future__ import annotations

from taxid.models.identifier import TaxIdentifier


class MemorySink:
    """List-backed IIdentifierSink; keeps identifiers in write order."""

    def __init__(self) -> None:
        self._items: list[TaxIdentifier] = []
        self.flush_count = 0

    def write(self, identifier: TaxIdentifier) -> None:
        self._items.append(identifier)

    def flush(self) -> None:
        self.flush_count += 1

    @property
    def values(self) -> list[TaxIdentifier]:
        return list(self._items)

    @property
    def lines(self) -> list[str]:
        return [str(identifier) for identifier in self._items]

    def __len__(self) -> int:
        return len(self._items)
