"""Record separator policies: deciding where a logical record ends.

A logical record is built from one or more raw lines. The accumulator asks
the policy after every line whether the record so far is complete, lets it
rewrite the partial record before the next line is appended, and lets it
rewrite the finished record once.

Policies that keep state between calls must put it back in ``reset()``.
The reader calls ``reset()`` on every open, so record boundaries after a
restart only line up when they depend on line position from the start of
the stream and nothing else.
"""

from __future__ import annotations


class RecordSeparatorPolicy:
    """Base policy: one line is one record.

    Subclasses override ``is_end_of_record`` and optionally the
    ``pre_process`` / ``post_process`` hooks and ``reset``.
    """

    def is_end_of_record(self, record: str) -> bool:
        """Return True if ``record`` (the lines accumulated so far) is complete."""
        return True

    def pre_process(self, record: str) -> str:
        """Rewrite an incomplete record before the next line is appended."""
        return record

    def post_process(self, record: str) -> str:
        """Rewrite a complete record before it is handed to the mapper."""
        return record

    def reset(self) -> None:
        """Forget any state carried over from a previous open cycle."""


class SimpleRecordSeparatorPolicy(RecordSeparatorPolicy):
    """Every line is a complete record."""


class LineCountRecordSeparatorPolicy(RecordSeparatorPolicy):
    """Groups a fixed number of lines into one record.

    Lines are concatenated without a separator, so with ``lines_per_record=2``
    the lines ``a`` and ``b`` become the record ``ab``. A short group at the
    end of input is still returned.

    Args:
        lines_per_record: Number of raw lines in each record (>= 1)
    """

    def __init__(self, lines_per_record: int = 2) -> None:
        if lines_per_record < 1:
            raise ValueError(f"lines_per_record must be >= 1, got {lines_per_record}")
        self._lines_per_record = lines_per_record
        self._lines_seen = 0

    @property
    def lines_per_record(self) -> int:
        return self._lines_per_record

    def is_end_of_record(self, record: str) -> bool:
        self._lines_seen += 1
        if self._lines_seen >= self._lines_per_record:
            self._lines_seen = 0
            return True
        return False

    def reset(self) -> None:
        self._lines_seen = 0


class DefaultRecordSeparatorPolicy(RecordSeparatorPolicy):
    """Quote- and continuation-aware line joining.

    A record is incomplete while it contains an odd number of quote
    characters (a quoted field spans a line break, which is kept), or while
    it ends with the continuation marker (the marker is dropped and the next
    line is appended directly).

    Args:
        quote_character: Character that opens and closes quoted fields
        continuation: Marker at the end of a line that continues the record
    """

    def __init__(self, quote_character: str = '"', continuation: str = "\\") -> None:
        self.quote_character = quote_character
        self.continuation = continuation

    def is_end_of_record(self, record: str) -> bool:
        return not self._is_quote_unterminated(record) and not self._is_continued(record)

    def pre_process(self, record: str) -> str:
        if self._is_quote_unterminated(record):
            return record + "\n"
        if self._is_continued(record):
            return record[: record.rfind(self.continuation)]
        return record

    def _is_quote_unterminated(self, record: str) -> bool:
        return record.count(self.quote_character) % 2 != 0

    def _is_continued(self, record: str) -> bool:
        return record.strip().endswith(self.continuation)


class SuffixRecordSeparatorPolicy(RecordSeparatorPolicy):
    """A record ends on the first line ending with a suffix (``;`` by default).

    The suffix is removed from the finished record.

    Args:
        suffix: Marker that terminates a record
        ignore_whitespace: Ignore trailing whitespace after the suffix
    """

    def __init__(self, suffix: str = ";", ignore_whitespace: bool = True) -> None:
        self.suffix = suffix
        self.ignore_whitespace = ignore_whitespace

    def is_end_of_record(self, record: str) -> bool:
        trimmed = record.strip() if self.ignore_whitespace else record
        return trimmed.endswith(self.suffix)

    def post_process(self, record: str) -> str:
        # A record cut short by end of input has no suffix to strip.
        index = record.rfind(self.suffix)
        if index < 0:
            return record
        return record[:index]


class JsonRecordSeparatorPolicy(RecordSeparatorPolicy):
    """A record ends once its curly braces balance and it ends with ``}``.

    Lets a pretty-printed JSON object span several lines. Blank lines
    between objects are folded into the following object.
    """

    def is_end_of_record(self, record: str) -> bool:
        return record.count("{") == record.count("}") and record.strip().endswith("}")
