"""Line cursor: raw line access over a resource's decoded text stream."""

from __future__ import annotations

import io
import logging
from typing import IO, Sequence

from .exceptions import ResourceNotFoundError
from .models import ValidationMode
from .resource import Resource

logger = logging.getLogger(__name__)


class LineCursor:
    """Reads raw lines from a resource and owns its stream while bound.

    The byte stream is decoded with the configured encoding before it is
    split, and any of ``\\n``, ``\\r\\n`` or ``\\r`` ends a line. Lines are
    returned without their newline. Lines starting with one of the comment
    prefixes are consumed but never returned.

    Args:
        encoding: Text encoding of the byte stream
        comments: Prefixes marking comment lines
    """

    def __init__(self, encoding: str = "utf-8", comments: Sequence[str] = ()) -> None:
        self._encoding = encoding
        self._comments = tuple(comments)
        self._stream: IO[str] | None = None
        self._line_number = 0

    def open(
        self, resource: Resource, mode: ValidationMode = ValidationMode.STRICT
    ) -> None:
        """Bind to a fresh stream from ``resource``.

        Args:
            resource: Source to read from
            mode: Whether a missing resource is fatal

        Raises:
            ResourceNotFoundError: If the resource is missing in strict mode
        """
        self.close()
        self._line_number = 0

        if not resource.exists():
            if mode is ValidationMode.STRICT:
                raise ResourceNotFoundError(resource.describe())
            logger.warning(
                "Input resource does not exist, reading nothing: %s",
                resource.describe(),
            )
            return

        self._stream = io.TextIOWrapper(resource.open_stream(), encoding=self._encoding)

    def next_line(self) -> str | None:
        """Return the next non-comment line, or None at end of input."""
        if self._stream is None:
            return None

        while True:
            line = self._stream.readline()
            if not line:
                return None
            self._line_number += 1
            line = line.rstrip("\n")
            if self._comments and line.startswith(self._comments):
                continue
            return line

    def close(self) -> None:
        """Release the stream. Safe to call repeatedly or when never bound."""
        if self._stream is not None:
            stream, self._stream = self._stream, None
            stream.close()

    @property
    def line_number(self) -> int:
        """Number of physical lines consumed since the last open."""
        return self._line_number

    @property
    def is_bound(self) -> bool:
        """Whether a stream is currently held."""
        return self._stream is not None
