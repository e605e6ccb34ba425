"""cqrskit exception hierarchy.

All exceptions raised by the package are subclasses of ``CqrsError`` so that
callers can catch any of them with a single except clause.

Expected business failures are NOT exceptions: handlers and behaviors return
a failure ``Result`` for those.  The classes below cover caller logic errors
and environment problems only:

    InvalidResultCodeError    ``Result.failure()`` called with a success code
    OperationCancelledError   cooperative cancellation observed by a handler
                              (defined in ``cancellation.py``)
    ConfigurationError        unreadable or invalid configuration
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cqrskit.result_code import ResultCode


class CqrsError(Exception):
    """Base class for all cqrskit exceptions."""


class InvalidResultCodeError(CqrsError, ValueError):
    """A failure result was requested with a result code that means success.

    ``code == 0`` is reserved for success, so ``Result.failure(ResultCode.SUCCESS)``
    contradicts the success invariant and is rejected at construction time.

    Attributes:
        result_code: The offending result code.
    """

    def __init__(self, result_code: "ResultCode") -> None:
        self.result_code = result_code
        super().__init__(
            f"Cannot build a failure result from '{result_code}': "
            f"code 0 is reserved for success."
        )


class ConfigurationError(CqrsError):
    """Configuration file or environment overrides could not be applied.

    Attributes:
        path: Config file involved, if any.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        location = f" ({path})" if path else ""
        super().__init__(f"Invalid configuration{location}: {message}")
