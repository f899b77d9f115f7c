"""Record accumulation: raw lines to logical records."""

from __future__ import annotations

from .cursor import LineCursor
from .separator import RecordSeparatorPolicy


class RecordAccumulator:
    """Assembles one logical record per call from a line cursor.

    Example:
        >>> accumulator = RecordAccumulator(cursor, LineCountRecordSeparatorPolicy(2))
        >>> accumulator.next_record()
        'testLine1testLine2'
    """

    def __init__(self, cursor: LineCursor, policy: RecordSeparatorPolicy) -> None:
        self._cursor = cursor
        self._policy = policy

    def next_record(self) -> str | None:
        """Return the next complete record, or None when input is exhausted.

        A record cut short by end of input is still returned as long as it
        holds some text; a blank remainder counts as no record.
        """
        record = self._cursor.next_line()
        if record is None:
            return None

        while not self._policy.is_end_of_record(record):
            line = self._cursor.next_line()
            if line is None:
                if not record.strip():
                    return None
                break
            record = self._policy.pre_process(record) + line

        return self._policy.post_process(record)

    @property
    def line_number(self) -> int:
        """Physical line number of the last line consumed."""
        return self._cursor.line_number
