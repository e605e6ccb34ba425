"""Behavior chain: RequestBehavior protocol and compose_behaviors().

A behavior chain wraps one request handler in a composable async chain.
Composition is right-to-left, so the first behavior in the list is the
outermost wrapper and runs first:

    request → LoggingBehavior → ValidationBehavior → ... → RequestHandler
    result  ←──────────────────────────────────────────────────────────────

Each behavior is an async callable that receives:
    (request, next: Callable[[request], Awaitable[Result]], cancellation)
and returns a Result.  Calling ``next`` proceeds; returning a Result without
calling it short-circuits the rest of the chain.  Every link returns the same
result type, so a short-circuit needs no sentinel.

Cancellation:
    The chain checks the ``CancellationToken`` before entering each link, and
    converts an ``OperationCancelledError`` raised by any link into a
    ``ResultCode.CANCELLED`` failure.  The caller always gets a Result back
    for a cancelled request.  Any other exception propagates unchanged; fault
    translation belongs to the dispatch engine (see ``ExceptionGuardBehavior``).
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, Sequence

from cqrskit.cancellation import CancellationToken, OperationCancelledError
from cqrskit.identity import correlation_id_of, fail_for
from cqrskit.result_code import ResultCode

if TYPE_CHECKING:
    from cqrskit.handlers import RequestHandler
    from cqrskit.result import Result

logger = logging.getLogger(__name__)

Next = Callable[[Any], Awaitable["Result"]]
_Step = Callable[[Any, CancellationToken], Awaitable["Result"]]


# ---------------------------------------------------------------------------
# RequestBehavior Protocol
# ---------------------------------------------------------------------------

class RequestBehavior(Protocol):
    """Protocol that every behavior must satisfy.

    A behavior calls ``next(request)`` at most once to proceed, or returns its
    own Result to short-circuit.  It must never mutate the Result it gets back
    from ``next``; to change it, return a new one.
    """

    async def __call__(
        self,
        request: Any,
        next: Next,
        cancellation: CancellationToken,
    ) -> "Result":
        """Process a request.

        Args:
            request:      The request (satisfies ``HasRequestId``).
            next:         Invokes the rest of the chain, ending in the handler.
            cancellation: Token shared by every link of this invocation.

        Returns:
            The Result from ``next`` or a Result of the same shape built here.
        """
        ...


# ---------------------------------------------------------------------------
# compose_behaviors: right-to-left composition
# ---------------------------------------------------------------------------

def _cancelled_result(request: Any, reason: str) -> "Result":
    errors = {"cancellation": [reason]} if reason else None
    return fail_for(request, ResultCode.CANCELLED, errors)


def _guarded(step: _Step) -> _Step:
    """Wrap *step* so cancellation surfaces as a CANCELLED Result."""

    async def run(request: Any, cancellation: CancellationToken) -> "Result":
        if cancellation.cancelled:
            logger.info("Request %s cancelled before next link", correlation_id_of(request))
            return _cancelled_result(request, cancellation.reason)
        try:
            return await step(request, cancellation)
        except OperationCancelledError as exc:
            logger.info("Request %s cancelled: %s", correlation_id_of(request), exc)
            return _cancelled_result(request, exc.reason)

    return run


def _link(behavior: RequestBehavior, inner: _Step) -> _Step:
    async def run(request: Any, cancellation: CancellationToken) -> "Result":
        async def next(next_request: Any) -> "Result":
            return await inner(next_request, cancellation)

        return await behavior(request, next, cancellation)

    return run


def compose_behaviors(
    behaviors: Sequence[RequestBehavior],
    handler: "RequestHandler[Any, Any]",
) -> Callable[..., Awaitable["Result"]]:
    """Compose *behaviors* around *handler* into a single callable.

    The first element of *behaviors* is the outermost wrapper (called first,
    returned from last).  An empty list returns a callable that invokes
    ``handler.handle()`` directly, still with cancellation checking.

    The returned callable has signature::

        async (request, cancellation: CancellationToken | None = None) -> Result

    Args:
        behaviors: Ordered behaviors.  May be empty.
        handler:   The innermost handler (must implement ``handle()``).

    Returns:
        A composed async callable.

    Example::

        chain = compose_behaviors(
            [LoggingBehavior(), ValidationBehavior([check_email])],
            CreateUserHandler(),
        )
        result = await chain(CreateUser(email="a@example.com"))
    """

    async def handle(request: Any, cancellation: CancellationToken) -> "Result":
        return await handler.handle(request, cancellation)

    step: _Step = _guarded(handle)
    for behavior in reversed(behaviors):
        step = _guarded(_link(behavior, step))

    async def execute(request: Any, cancellation: CancellationToken | None = None) -> "Result":
        token = cancellation if cancellation is not None else CancellationToken.none()
        return await step(request, token)

    return execute
