"""Shared test doubles: the memory sink plus sinks that fail or record threads."""

from __future__ import annotations

import threading

from taxid.models.identifier import TaxIdentifier
from taxid.persistence.memory_sink import MemorySink


class FailingSink(MemorySink):
    """MemorySink that raises OSError once ``fail_after`` identifiers were written."""

    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.writer_threads: set[str] = set()

    def write(self, identifier: TaxIdentifier) -> None:
        self.writer_threads.add(threading.current_thread().name)
        if len(self) >= self.fail_after:
            raise OSError("disk full")
        super().write(identifier)


class ThreadRecordingSink(MemorySink):
    """MemorySink that remembers which threads wrote to it."""

    def __init__(self) -> None:
        super().__init__()
        self.writer_threads: set[str] = set()

    def write(self, identifier: TaxIdentifier) -> None:
        self.writer_threads.add(threading.current_thread().name)
        super().write(identifier)


__all__ = ["FailingSink", "MemorySink", "ThreadRecordingSink"]
