"""Checkpoint context shared between reader open/close cycles."""

from __future__ import annotations

from typing import Iterator, Mapping


class ExecutionContext:
    """Mutable mapping of string keys to integer checkpoint values.

    The caller owns the context and scopes it to one logical job. Readers
    read their keys on ``open()`` and write them on ``update()``; the
    ``dirty`` flag tells the caller whether anything changed since it last
    persisted the context.

    Example:
        >>> context = ExecutionContext()
        >>> reader.open(context)
        >>> reader.read()
        >>> reader.update(context)
        >>> context.get_int("orders.read.count")
        1
    """

    def __init__(self, entries: Mapping[str, int] | None = None) -> None:
        self._entries: dict[str, int] = {}
        self._dirty = False
        for key, value in (entries or {}).items():
            self.put_int(key, value)
        self._dirty = False

    def put_int(self, key: str, value: int) -> None:
        """Store an integer under ``key``.

        Raises:
            TypeError: If ``value`` is not an int
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"Context values must be int, got {type(value).__name__} for {key!r}"
            )
        if self._entries.get(key) != value:
            self._dirty = True
        self._entries[key] = value

    def get_int(self, key: str, default: int | None = None) -> int:
        """Return the integer stored under ``key``.

        Raises:
            KeyError: If the key is absent and no default was given
        """
        if key in self._entries:
            return self._entries[key]
        if default is None:
            raise KeyError(key)
        return default

    def contains_key(self, key: str) -> bool:
        return key in self._entries

    def remove(self, key: str) -> int | None:
        """Remove ``key`` and return its value (None if absent)."""
        if key not in self._entries:
            return None
        self._dirty = True
        return self._entries.pop(key)

    @property
    def dirty(self) -> bool:
        """True if the context changed since the last ``clear_dirty_flag()``."""
        return self._dirty

    def clear_dirty_flag(self) -> None:
        self._dirty = False

    def to_dict(self) -> dict[str, int]:
        """Return a copy of all entries."""
        return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: str) -> int:
        return self._entries[key]

    def __setitem__(self, key: str, value: int) -> None:
        self.put_int(key, value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExecutionContext):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"ExecutionContext({self._entries!r}, dirty={self._dirty})"
