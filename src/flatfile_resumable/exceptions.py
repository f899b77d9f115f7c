"""Custom exceptions for flatfile-resumable."""

from __future__ import annotations


class ItemStreamError(Exception):
    """Base class for reader lifecycle errors.

    All errors raised by the reader itself inherit from this, allowing
    callers to catch every reader failure with a single except. Errors
    raised by a line mapper are not wrapped and do not inherit from it.
    """


class ReaderConfigurationError(ItemStreamError):
    """Raised when the reader is configured inconsistently.

    This can happen if:
    - No resource was set before opening
    - The reader has no name to build its checkpoint keys from
    - A count setting is negative
    """


class ReaderStateError(ItemStreamError):
    """Raised when an operation is called in the wrong lifecycle state.

    For example reading before ``open()``, opening twice, or changing
    configuration while the reader is open.
    """


class ResourceNotFoundError(ItemStreamError):
    """Resource does not exist at open time in strict mode.

    Attributes:
        description: Human-readable description of the missing resource
    """

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(
            f"Input resource must exist (reader is in 'strict' mode): {description}"
        )


class SkipRecord(Exception):
    """Raised by a line mapper to mark a record as not a data record.

    The reader drops the record and moves on to the next one, so embedded
    headers or separator lines never reach the caller. This is a control
    signal, not an error.
    """
