"""Byte sources the reader can bind to."""

from __future__ import annotations

import io
from pathlib import Path
from typing import IO, Protocol, Union, runtime_checkable


@runtime_checkable
class Resource(Protocol):
    """A byte-producing source handle.

    The reader only calls these methods from ``open()``; the returned
    stream is owned by the line cursor until the reader closes.
    """

    def exists(self) -> bool:
        """Return True if the resource can be opened right now."""
        ...

    def describe(self) -> str:
        """Return a human-readable description for diagnostics."""
        ...

    def open_stream(self) -> IO[bytes]:
        """Open a fresh binary stream positioned at the start of the data."""
        ...


class FileResource:
    """A file on the local filesystem.

    The file does not need to exist when the resource is created; existence
    is checked each time the reader opens.

    Example:
        >>> resource = FileResource("orders.txt")
        >>> resource.exists()
        True
    """

    def __init__(self, file_path: Union[str, Path]) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        """Path to the underlying file."""
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.is_file()

    def describe(self) -> str:
        return f"file [{self._file_path.resolve()}]"

    def open_stream(self) -> IO[bytes]:
        return open(self._file_path, "rb")

    def __repr__(self) -> str:
        return f"FileResource({str(self._file_path)!r})"


class BytesResource:
    """An in-memory byte buffer.

    Each call to ``open_stream()`` returns an independent stream over the
    same bytes, so a reader can be reopened any number of times.
    """

    def __init__(self, data: Union[bytes, str], description: str = "byte buffer") -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = data
        self._description = description

    def exists(self) -> bool:
        return True

    def describe(self) -> str:
        return f"{self._description} ({len(self._data)} bytes)"

    def open_stream(self) -> IO[bytes]:
        return io.BytesIO(self._data)

    def __repr__(self) -> str:
        return f"BytesResource(<{len(self._data)} bytes>)"
