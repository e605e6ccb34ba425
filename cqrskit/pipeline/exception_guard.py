"""ExceptionGuardBehavior: translates unexpected faults into failure Results.

``compose_behaviors()`` never catches handler faults itself.  A dispatch
engine that wants the chain to always return a Result registers this
behavior as the outermost link (or just inside ``LoggingBehavior``).

On each call:
1. Calls next(request).
2. If next raises an ``Exception``: logs it with traceback and returns
   ``request.fail(result_code)`` (``ResultCode.EXCEPTION`` by default), with
   the exception type under the ``"exception"`` error key.
3. ``BaseException`` subclasses that are not ``Exception`` (``CancelledError``,
   ``KeyboardInterrupt``) propagate.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TYPE_CHECKING

from cqrskit.identity import correlation_id_of, fail_for
from cqrskit.result_code import ResultCode

if TYPE_CHECKING:
    from cqrskit.cancellation import CancellationToken
    from cqrskit.result import Result

logger = logging.getLogger(__name__)


class ExceptionGuardBehavior:
    """Returns an EXCEPTION failure instead of letting a fault escape.

    Args:
        result_code:     Code for the translated failure.
        include_message: If True, the exception message is added to the
                         errors map.  Off by default so internal details do
                         not reach API clients.
    """

    def __init__(
        self,
        result_code: ResultCode = ResultCode.EXCEPTION,
        include_message: bool = False,
    ) -> None:
        self._result_code = result_code
        self._include_message = include_message

    async def __call__(
        self,
        request: Any,
        next: Callable[[Any], Awaitable["Result"]],
        cancellation: "CancellationToken",
    ) -> "Result":
        """Run the rest of the chain, translating any raised Exception."""
        try:
            return await next(request)
        except Exception as exc:
            logger.exception(
                "Unhandled %s while handling %s (id=%s)",
                type(exc).__name__, type(request).__name__, correlation_id_of(request),
            )
            messages = [type(exc).__name__]
            if self._include_message and str(exc):
                messages.append(str(exc))
            return fail_for(request, self._result_code, {"exception": messages})
