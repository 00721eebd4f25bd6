"""Line-oriented text sinks: one 11-digit identifier per line, no header."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from taxid.core.exceptions import SinkWriteError
from taxid.models.identifier import TaxIdentifier


class StreamSink:
    """IIdentifierSink writing to an already-open text stream it does not own."""

    def __init__(self, stream: TextIO, *, name: str = "<stream>") -> None:
        self._stream = stream
        self._name = name

    def write(self, identifier: TaxIdentifier) -> None:
        try:
            self._stream.write(f"{identifier}\n")
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Write to {self._name} failed: {exc}") from exc

    def flush(self) -> None:
        try:
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Flush of {self._name} failed: {exc}") from exc

    def close(self) -> None:
        """Leave the borrowed stream open; its owner closes it."""

    def __enter__(self) -> StreamSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FileSink(StreamSink):
    """IIdentifierSink backed by a file it creates (or truncates) and owns."""

    def __init__(self, path: str | Path, *, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        try:
            stream = self.path.open("w", encoding=encoding, newline="\n")
        except OSError as exc:
            raise SinkWriteError(f"Cannot open {self.path} for writing: {exc}") from exc
        super().__init__(stream, name=str(self.path))

    def close(self) -> None:
        if self._stream.closed:
            return
        try:
            self._stream.close()
        except OSError as exc:
            raise SinkWriteError(f"Closing {self.path} failed: {exc}") from exc

    def __enter__(self) -> FileSink:
        return self
