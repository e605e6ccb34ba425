"""Handler protocols for requests and notifications.

**RequestHandler**: every request handler implements
``async def handle(request, cancellation) -> Result``.  It returns a failure
``Result`` for expected failures and only raises for unexpected faults, which
the dispatch engine (or an ``ExceptionGuardBehavior``) translates.

**NotificationHandler**: ``async def handle(notification, cancellation) -> None``.
Handlers for one notification run independently of each other, so they must
be written to tolerate partial failure and retries (idempotent side effects).

Both protocols are ``runtime_checkable`` so an engine can validate handler
objects at registration time with ``isinstance(obj, RequestHandler)``.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from cqrskit.cancellation import CancellationToken
    from cqrskit.result import Result

TRequest = TypeVar("TRequest", contravariant=True)
TNotification = TypeVar("TNotification", contravariant=True)
TResult = TypeVar("TResult", bound="Result", covariant=True)


@runtime_checkable
class RequestHandler(Protocol[TRequest, TResult]):
    """Protocol that every request handler must satisfy."""

    async def handle(self, request: TRequest, cancellation: "CancellationToken") -> TResult:
        """Handle *request*.

        Args:
            request:      The request, carrying a stable ``request_id``.
            cancellation: Token to poll between units of work.

        Returns:
            A ``Result`` of the request's declared result type.
        """
        ...


@runtime_checkable
class NotificationHandler(Protocol[TNotification]):
    """Protocol that every notification handler must satisfy."""

    async def handle(self, notification: TNotification, cancellation: "CancellationToken") -> None:
        """Perform this handler's side effect for *notification*."""
        ...
