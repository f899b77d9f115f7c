"""Restartable flat-file item reader."""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Iterator, Sequence

from .accumulator import RecordAccumulator
from .context import ExecutionContext
from .cursor import LineCursor
from .exceptions import ReaderConfigurationError, ReaderStateError, SkipRecord
from .mapping import MapperLike, PassThroughLineMapper, as_line_mapper
from .models import CheckpointKeys, ValidationMode
from .resource import Resource
from .separator import RecordSeparatorPolicy, SimpleRecordSeparatorPolicy

logger = logging.getLogger(__name__)

_END = object()


class FlatFileItemReader:
    """Line-oriented item reader that can resume after a restart.

    Each ``read()`` assembles one logical record from one or more raw lines
    (per the record separator policy), maps it to an item and counts it.
    ``update()`` publishes the count into an execution context; a reader
    opened later with the same context skips the records already counted
    and carries on from there.

    Example:
        >>> context = load_context(path) or ExecutionContext()
        >>> reader = FlatFileItemReader(FileResource("orders.txt"), name="orders")
        >>> reader.open(context)
        >>> for order in reader:
        ...     process(order)
        ...     reader.update(context)
        ...     save_context(path, context)
        >>> reader.close()
    """

    def __init__(
        self,
        resource: Resource | None = None,
        *,
        name: str = "",
        line_mapper: MapperLike | None = None,
        record_separator_policy: RecordSeparatorPolicy | None = None,
        lines_to_skip: int = 0,
        current_item_count: int = 0,
        max_item_count: int = sys.maxsize,
        strict: bool = True,
        encoding: str = "utf-8",
        comments: Sequence[str] = (),
        skipped_lines_callback: Callable[[str], None] | None = None,
        save_state: bool = True,
    ) -> None:
        """Configure a reader. Nothing is opened until ``open()``.

        Args:
            resource: Source to read; may be set or replaced later while closed
            name: Stable identifier used to build the checkpoint keys
            line_mapper: Converts record text to items (default: pass-through)
            record_separator_policy: Decides where records end (default: one line each)
            lines_to_skip: Header lines discarded on every open, never counted
            current_item_count: Items to skip when the context holds no count
            max_item_count: Stop returning items once this many have been read
            strict: Fail on open if the resource does not exist
            encoding: Text encoding of the resource
            comments: Line prefixes marking comment lines to ignore
            skipped_lines_callback: Called with each skipped header line
            save_state: Read and write the checkpoint keys in the context
        """
        self._resource = resource
        self._name = name
        self._line_mapper = as_line_mapper(
            PassThroughLineMapper() if line_mapper is None else line_mapper
        )
        self._policy = (
            SimpleRecordSeparatorPolicy()
            if record_separator_policy is None
            else record_separator_policy
        )
        self._lines_to_skip = lines_to_skip
        self._current_item_count = current_item_count
        self._max_item_count = max_item_count
        self._validation_mode = ValidationMode.from_strict(strict)
        self._encoding = encoding
        self._comments = tuple(comments)
        self._skipped_lines_callback = skipped_lines_callback
        self._save_state = save_state

        self._cursor = LineCursor(encoding, self._comments)
        self._accumulator = RecordAccumulator(self._cursor, self._policy)
        self._read_count = 0
        self._effective_max = max_item_count
        self._open = False

    # ─────────────────────────────────────────────────────────────────────
    # Configuration
    # ─────────────────────────────────────────────────────────────────────

    def _check_closed(self, attribute: str) -> None:
        if self._open:
            raise ReaderStateError(f"Cannot change {attribute} while the reader is open")

    @property
    def name(self) -> str:
        return self._name

    @property
    def checkpoint_keys(self) -> CheckpointKeys:
        """Context keys this reader reads on open and writes on update."""
        return CheckpointKeys.for_name(self._name)

    @property
    def resource(self) -> Resource | None:
        return self._resource

    @resource.setter
    def resource(self, resource: Resource | None) -> None:
        self._check_closed("resource")
        self._resource = resource

    @property
    def lines_to_skip(self) -> int:
        return self._lines_to_skip

    @lines_to_skip.setter
    def lines_to_skip(self, value: int) -> None:
        self._check_closed("lines_to_skip")
        self._lines_to_skip = value

    @property
    def current_item_count(self) -> int:
        """Configured baseline, used only when the context holds no count."""
        return self._current_item_count

    @current_item_count.setter
    def current_item_count(self, value: int) -> None:
        self._check_closed("current_item_count")
        self._current_item_count = value

    @property
    def max_item_count(self) -> int:
        """Configured item bound (see ``effective_max_item_count``)."""
        return self._max_item_count

    @max_item_count.setter
    def max_item_count(self, value: int) -> None:
        self._check_closed("max_item_count")
        self._max_item_count = value

    @property
    def effective_max_item_count(self) -> int:
        """Item bound in force for the current open cycle."""
        return self._effective_max

    @property
    def validation_mode(self) -> ValidationMode:
        return self._validation_mode

    @validation_mode.setter
    def validation_mode(self, mode: ValidationMode) -> None:
        self._check_closed("validation_mode")
        self._validation_mode = ValidationMode(mode)

    @property
    def strict(self) -> bool:
        return self._validation_mode is ValidationMode.STRICT

    @strict.setter
    def strict(self, value: bool) -> None:
        self.validation_mode = ValidationMode.from_strict(value)

    @property
    def save_state(self) -> bool:
        return self._save_state

    @save_state.setter
    def save_state(self, value: bool) -> None:
        self._check_closed("save_state")
        self._save_state = value

    def after_properties_set(self) -> None:
        """Validate the configuration without touching the resource.

        Only the presence of a resource is checked here; whether it exists
        is decided at ``open()`` time against whatever resource is set then.

        Raises:
            ReaderConfigurationError: If the configuration is unusable
        """
        if self._resource is None:
            raise ReaderConfigurationError("Input resource must be set")
        if self._save_state and not self._name:
            raise ReaderConfigurationError(
                "A name is required to build checkpoint keys when save_state is set"
            )
        for attribute in ("lines_to_skip", "current_item_count", "max_item_count"):
            value = getattr(self, attribute)
            if value < 0:
                raise ReaderConfigurationError(f"{attribute} must be >= 0, got {value}")

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def open(self, context: ExecutionContext) -> None:
        """Bind to the resource and position the reader.

        Skips header lines, then restores the read count from ``context``
        (or ``current_item_count`` if the context has none) and skips that
        many items so the next ``read()`` returns the first unread one.

        Raises:
            ReaderStateError: If the reader is already open
            ReaderConfigurationError: If the configuration is unusable
            ResourceNotFoundError: If the resource is missing in strict mode
        """
        if self._open:
            raise ReaderStateError("Reader is already open")
        self.after_properties_set()

        self._policy.reset()
        self._cursor = LineCursor(self._encoding, self._comments)
        self._accumulator = RecordAccumulator(self._cursor, self._policy)

        try:
            self._cursor.open(self._resource, self._validation_mode)
            self._skip_header_lines()
            self._restore(context)
        except BaseException:
            self._cursor.close()
            raise

        self._open = True
        logger.debug(
            "Opened %s at item %d (max %d)",
            self._resource.describe(),
            self._read_count,
            self._effective_max,
        )

    def _skip_header_lines(self) -> None:
        skipped = 0
        while skipped < self._lines_to_skip:
            line = self._cursor.next_line()
            if line is None:
                break
            skipped += 1
            if self._skipped_lines_callback is not None:
                self._skipped_lines_callback(line)
        if skipped:
            logger.debug("Skipped %d header line(s)", skipped)

    def _restore(self, context: ExecutionContext) -> None:
        keys = self.checkpoint_keys
        item_count = self._current_item_count
        self._effective_max = self._max_item_count

        if self._save_state:
            # The two keys are independent: either may be present alone.
            if keys.read_count_max in context:
                self._effective_max = context.get_int(keys.read_count_max)
            if keys.read_count in context:
                item_count = context.get_int(keys.read_count)

        self._read_count = item_count
        if 0 < item_count < self._effective_max:
            self._jump_to_item(item_count)

    def _jump_to_item(self, item_count: int) -> None:
        for skipped in range(item_count):
            if self._next_item() is _END:
                logger.debug("Input ended after skipping %d of %d items", skipped, item_count)
                return
        logger.debug("Skipped %d previously read item(s)", item_count)

    def _next_item(self) -> Any:
        while True:
            record = self._accumulator.next_record()
            if record is None:
                return _END
            line_number = self._accumulator.line_number
            try:
                item = self._line_mapper.map_line(record, line_number)
            except SkipRecord as e:
                logger.debug("Skipped record at line %d: %s", line_number, e)
                continue
            if item is None:
                raise TypeError(
                    f"Line mapper returned None for the record ending at line {line_number}; "
                    "raise SkipRecord to drop a record"
                )
            return item

    def read(self) -> Any:
        """Return the next item, or None at end of data.

        End of data is reached when input is exhausted or when
        ``effective_max_item_count`` items have been read; neither is an
        error. Exceptions from the line mapper propagate unchanged.

        Raises:
            ReaderStateError: If the reader is not open
            TypeError: If the line mapper returns None for a record
        """
        if not self._open:
            raise ReaderStateError("Reader must be open before it can be read")

        if self._read_count >= self._effective_max:
            return None

        item = self._next_item()
        if item is _END:
            return None

        self._read_count += 1
        return item

    def update(self, context: ExecutionContext) -> None:
        """Publish the current read count into ``context``.

        Only the read count key is written; the max override key is
        never touched.

        Raises:
            ReaderStateError: If the reader is not open
        """
        if not self._open:
            raise ReaderStateError("Reader must be open before its state can be saved")
        if self._save_state:
            context.put_int(self.checkpoint_keys.read_count, self._read_count)
            logger.debug("Saved read count %d for '%s'", self._read_count, self._name)

    def close(self) -> None:
        """Release the resource. Safe to call at any time, any number of times.

        The read count is kept, so ``read_count`` still reports the last
        position after closing.
        """
        self._cursor.close()
        if self._open:
            logger.debug("Closed reader '%s' after %d item(s)", self._name, self._read_count)
        self._open = False

    # ─────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────

    @property
    def read_count(self) -> int:
        """Items read so far, including those skipped to resume."""
        return self._read_count

    @property
    def line_number(self) -> int:
        """Physical line number of the last line consumed (diagnostic)."""
        return self._cursor.line_number

    @property
    def is_open(self) -> bool:
        return self._open

    def __iter__(self) -> Iterator[Any]:
        """Yield items until end of data."""
        while True:
            item = self.read()
            if item is None:
                return
            yield item

    def __enter__(self) -> "FlatFileItemReader":
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager and close the resource."""
        self.close()

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"FlatFileItemReader(name={self._name!r}, resource={self._resource!r}, {state})"
