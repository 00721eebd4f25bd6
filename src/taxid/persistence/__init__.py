"""Pluggable output sinks behind the IIdentifierSink protocol."""

from __future__ import annotations

import sys
from pathlib import Path

from taxid.persistence.file_sink import FileSink, StreamSink
from taxid.persistence.memory_sink import MemorySink

STDOUT_TARGET = "-"


def create_sink(target: str | Path) -> StreamSink:
    """Create a text sink for ``target``: a file path, or ``"-"`` for stdout.

    The returned sink is a context manager; closing a stdout sink leaves
    stdout open.
    """
    if str(target) == STDOUT_TARGET:
        return StreamSink(sys.stdout, name="<stdout>")
    return FileSink(target)


__all__ = ["FileSink", "MemorySink", "StreamSink", "create_sink"]
