"""Data models for flatfile-resumable."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

READ_COUNT = "read.count"
READ_COUNT_MAX = "read.count.max"


class ValidationMode(str, Enum):
    """How a missing resource is treated when the reader opens.

    Attributes:
        STRICT: A missing resource is fatal
        LENIENT: A missing resource behaves like an empty one
    """

    STRICT = "strict"
    LENIENT = "lenient"

    @classmethod
    def from_strict(cls, strict: bool) -> "ValidationMode":
        return cls.STRICT if strict else cls.LENIENT


@dataclass(frozen=True, slots=True)
class CheckpointKeys:
    """The two well-known context keys owned by one named reader.

    Attributes:
        name: Stable identifier of the reader
        read_count: Key holding the number of items already read
        read_count_max: Key holding an optional override of the item bound
    """

    name: str
    read_count: str
    read_count_max: str

    @classmethod
    def for_name(cls, name: str) -> "CheckpointKeys":
        return cls(
            name=name,
            read_count=f"{name}.{READ_COUNT}",
            read_count_max=f"{name}.{READ_COUNT_MAX}",
        )
