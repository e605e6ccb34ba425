"""LoggingBehavior: structured log lines around each request.

This behavior is designed to be the outermost link so that its timing covers
every inner behavior as well as the handler.  It:
1. Logs ``request.started`` at DEBUG before calling next.
2. Calls next(request).
3. Logs the result at INFO (success) or WARNING (failure) with the request
   type, request id, categorized code and duration.
4. Logs the full ``ResultRecord`` JSON at DEBUG.
5. Logs a WARNING when the request took longer than ``slow_threshold_ms``.
6. On exception: logs it with the duration and re-raises.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, TYPE_CHECKING

from cqrskit.identity import correlation_id_of
from cqrskit.record import ResultRecord

if TYPE_CHECKING:
    from cqrskit.cancellation import CancellationToken
    from cqrskit.result import Result



class LoggingBehavior:
    """Logs request lifecycle and result for every invocation.

    Args:
        logger:            Logger to write to.  Defaults to this module's logger.
        slow_threshold_ms: Duration above which a WARNING is logged.  ``None``
                           disables the check.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        slow_threshold_ms: float | None = None,
    ) -> None:
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._slow_threshold_ms = slow_threshold_ms

    async def __call__(
        self,
        request: Any,
        next: Callable[[Any], Awaitable["Result"]],
        cancellation: "CancellationToken",
    ) -> "Result":
        """Log around the rest of the chain."""
        request_type = type(request).__name__
        request_id = correlation_id_of(request)
        log = self._logger

        log.debug("request.started %s id=%s", request_type, request_id)
        start_time = time.monotonic()

        try:
            result = await next(request)
        except Exception as exc:
            duration_ms = (time.monotonic() - start_time) * 1000.0
            log.error(
                "request.raised %s id=%s error=%s duration_ms=%.1f",
                request_type, request_id, type(exc).__name__, duration_ms,
            )
            raise

        duration_ms = (time.monotonic() - start_time) * 1000.0

        if result.is_success:
            log.info(
                "request.succeeded %s id=%s code=%s duration_ms=%.1f",
                request_type, request_id, result.categorized_code, duration_ms,
            )
        else:
            log.warning(
                "request.failed %s id=%s code=%s description=%s errors=%d duration_ms=%.1f",
                request_type, request_id, result.categorized_code,
                result.description, len(result.errors), duration_ms,
            )

        if log.isEnabledFor(logging.DEBUG):
            try:
                log.debug("request.result %s", ResultRecord.from_result(result).model_dump_json())
            except ValueError as exc:
                # Payloads pydantic cannot serialise are logged by id only.
                log.debug("request.result %s not serialisable: %s", request_id, exc)

        if self._slow_threshold_ms is not None and duration_ms > self._slow_threshold_ms:
            log.warning(
                "request.slow %s id=%s duration_ms=%.1f threshold_ms=%.1f",
                request_type, request_id, duration_ms, self._slow_threshold_ms,
            )

        return result
