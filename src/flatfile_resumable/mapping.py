"""Line mappers: turning record text into items."""

from __future__ import annotations

import json
from typing import Any, Callable, Protocol, TypeVar, Union

from .exceptions import SkipRecord

T_co = TypeVar("T_co", covariant=True)


class LineMapper(Protocol[T_co]):
    """Converts one logical record into an item.

    Implementations may raise ``SkipRecord`` to drop a record that is not
    data (an embedded header, a separator line). Any other exception is
    treated as fatal and reaches the caller of ``read()`` unchanged.
    Mappers must not return None, which ``read()`` reserves for end of data;
    the reader raises ``TypeError`` if one does.
    """

    def map_line(self, line: str, line_number: int) -> T_co:
        ...


MapperLike = Union[LineMapper[Any], Callable[[str, int], Any]]


class PassThroughLineMapper:
    """Returns the record text unchanged."""

    def map_line(self, line: str, line_number: int) -> str:
        return line


class JsonLineMapper:
    """Parses each record as a JSON document.

    A ``null`` document carries no item and is skipped like a blank record.

    Args:
        skip_blank: Drop blank records instead of failing to parse them
    """

    def __init__(self, skip_blank: bool = False) -> None:
        self.skip_blank = skip_blank

    def map_line(self, line: str, line_number: int) -> Any:
        """Parse ``line`` as JSON.

        Raises:
            SkipRecord: If the record is ``null``, or blank with ``skip_blank`` set
            json.JSONDecodeError: If the record is not valid JSON
        """
        if self.skip_blank and not line.strip():
            raise SkipRecord(f"blank record ending at line {line_number}")
        item = json.loads(line)
        if item is None:
            raise SkipRecord(f"null record ending at line {line_number}")
        return item


class CallableLineMapper:
    """Adapts a plain ``(line, line_number) -> item`` function."""

    def __init__(self, func: Callable[[str, int], Any]) -> None:
        self._func = func

    def map_line(self, line: str, line_number: int) -> Any:
        return self._func(line, line_number)


def as_line_mapper(mapper: MapperLike) -> LineMapper[Any]:
    """Return ``mapper`` as an object with a ``map_line`` method."""
    if hasattr(mapper, "map_line"):
        return mapper  # type: ignore[return-value]
    if callable(mapper):
        return CallableLineMapper(mapper)
    raise TypeError(f"Expected a line mapper or callable, got {type(mapper).__name__}")
