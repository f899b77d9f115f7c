"""flatfile-resumable: restartable line-oriented record reading with checkpoints.

Example:
    >>> from flatfile_resumable import ExecutionContext, FileResource, FlatFileItemReader
    >>> context = ExecutionContext()
    >>> reader = FlatFileItemReader(FileResource("orders.txt"), name="orders", lines_to_skip=1)
    >>>
    >>> # Read and checkpoint
    >>> reader.open(context)
    >>> first = reader.read()
    >>> reader.update(context)
    >>> reader.close()
    >>>
    >>> # A fresh reader with the same context resumes after `first`
    >>> with FlatFileItemReader(FileResource("orders.txt"), name="orders", lines_to_skip=1) as again:
    ...     again.open(context)
    ...     for record in again:
    ...         process(record)
    >>>
    >>> # Multi-line records
    >>> reader = FlatFileItemReader(
    ...     FileResource("events.json"),
    ...     name="events",
    ...     record_separator_policy=JsonRecordSeparatorPolicy(),
    ...     line_mapper=JsonLineMapper(),
    ... )
"""

from .accumulator import RecordAccumulator
from .context import ExecutionContext
from .cursor import LineCursor
from .exceptions import (
    ItemStreamError,
    ReaderConfigurationError,
    ReaderStateError,
    ResourceNotFoundError,
    SkipRecord,
)
from .mapping import JsonLineMapper, LineMapper, PassThroughLineMapper
from .models import CheckpointKeys, ValidationMode
from .progress import load_context, save_context
from .reader import FlatFileItemReader
from .resource import BytesResource, FileResource, Resource
from .separator import (
    DefaultRecordSeparatorPolicy,
    JsonRecordSeparatorPolicy,
    LineCountRecordSeparatorPolicy,
    RecordSeparatorPolicy,
    SimpleRecordSeparatorPolicy,
    SuffixRecordSeparatorPolicy,
)

__version__ = "0.1.0"
__all__ = [
    # Core
    "FlatFileItemReader",
    "ExecutionContext",
    "CheckpointKeys",
    "ValidationMode",
    "LineCursor",
    "RecordAccumulator",
    # Resources
    "Resource",
    "FileResource",
    "BytesResource",
    # Separator Policies
    "RecordSeparatorPolicy",
    "SimpleRecordSeparatorPolicy",
    "LineCountRecordSeparatorPolicy",
    "DefaultRecordSeparatorPolicy",
    "SuffixRecordSeparatorPolicy",
    "JsonRecordSeparatorPolicy",
    # Mapping
    "LineMapper",
    "PassThroughLineMapper",
    "JsonLineMapper",
    # Persistence
    "load_context",
    "save_context",
    # Exceptions
    "ItemStreamError",
    "ReaderConfigurationError",
    "ReaderStateError",
    "ResourceNotFoundError",
    "SkipRecord",
]
