from __future__ import annotations

import sys
from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

"""Capabilities the import session needs from its environment.

The session never touches the filesystem or a clipboard directly; it is handed
objects satisfying these protocols.
"""

__all__ = [
    "ClipboardPort",
    "FileReaderPort",
    "LocalFileReader",
    "StreamClipboard",
]


@runtime_checkable
class ClipboardPort(Protocol):
    def write_text(self, text: str) -> None: ...


@runtime_checkable
class FileReaderPort(Protocol):
    def read(self, path: Path) -> bytes: ...


class LocalFileReader:
    """Reads files from the local filesystem."""

    def read(self, path: Path) -> bytes:
        return Path(path).read_bytes()


class StreamClipboard:
    """Clipboard stand-in for terminals: writes the text to a stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def write_text(self, text: str) -> None:
        self.stream.write(text)
        if not text.endswith("\n"):
            self.stream.write("\n")
        self.stream.flush()
