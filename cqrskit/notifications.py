"""Notification fan-out with per-handler failure isolation.

``publish()`` delivers one notification to every handler.  A handler that
raises never prevents the others from running: with the ``parallel``
strategy handlers run concurrently via ``asyncio.gather(...,
return_exceptions=True)``; with ``sequential`` they run in order and each
handler's exception is caught before the next one starts.

No Result is returned to coordinate partial failure.  Failures are logged at
WARNING and handed back as ``NotificationFailure`` records for callers that
want to report or retry them.

``publish_from_config()`` reads the strategy from a loaded ``CqrsConfig``.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Sequence
from uuid import UUID

from cqrskit.cancellation import CancellationToken
from cqrskit.handlers import NotificationHandler
from cqrskit.identity import correlation_id_of

if TYPE_CHECKING:
    from cqrskit.config import CqrsConfig

logger = logging.getLogger(__name__)

PublishStrategy = Literal["parallel", "sequential"]


@dataclass(frozen=True)
class NotificationFailure:
    """One handler's failure for one notification.

    Attributes:
        handler:         Handler class name.
        notification_id: Id of the notification that was being handled.
        error:           The exception the handler raised.
    """

    handler: str
    notification_id: UUID | None
    error: BaseException


def _handler_name(handler: Any) -> str:
    return type(handler).__name__


async def _run_one(
    handler: NotificationHandler[Any],
    notification: Any,
    cancellation: CancellationToken,
) -> None:
    if cancellation.cancelled:
        logger.debug(
            "Skipping %s for notification %s: cancelled",
            _handler_name(handler), correlation_id_of(notification),
        )
        return
    await handler.handle(notification, cancellation)


async def publish(
    notification: Any,
    handlers: Sequence[NotificationHandler[Any]],
    cancellation: CancellationToken | None = None,
    *,
    strategy: PublishStrategy = "parallel",
) -> list[NotificationFailure]:
    """Deliver *notification* to every handler in *handlers*.

    Args:
        notification: The notification (satisfies ``HasNotificationId``).
        handlers:     Handlers to invoke.  May be empty.
        cancellation: Token passed to each handler; handlers not yet started
                      are skipped once it is cancelled.
        strategy:     ``"parallel"`` (default) or ``"sequential"``.

    Returns:
        One ``NotificationFailure`` per handler that raised, in handler order.
    """
    if strategy not in ("parallel", "sequential"):
        raise ValueError(f"Unknown publish strategy '{strategy}'")
    token = cancellation if cancellation is not None else CancellationToken.none()
    notification_id = correlation_id_of(notification)
    if not handlers:
        logger.debug("No handlers for notification %s", notification_id)
        return []

    outcomes: list[BaseException | None]
    if strategy == "parallel":
        gathered = await asyncio.gather(
            *[_run_one(h, notification, token) for h in handlers],
            return_exceptions=True,
        )
        outcomes = [r if isinstance(r, Exception) else None for r in gathered]
        for r in gathered:
            # CancelledError and other BaseExceptions are not handler failures.
            if isinstance(r, BaseException) and not isinstance(r, Exception):
                raise r
    else:
        outcomes = []
        for handler in handlers:
            try:
                await _run_one(handler, notification, token)
            except Exception as exc:
                outcomes.append(exc)
            else:
                outcomes.append(None)

    failures: list[NotificationFailure] = []
    for handler, error in zip(handlers, outcomes):
        if error is None:
            continue
        logger.warning(
            "Notification handler %s failed on %s (id=%s): %s",
            _handler_name(handler),
            type(notification).__name__,
            notification_id,
            error,
        )
        failures.append(NotificationFailure(
            handler=_handler_name(handler),
            notification_id=notification_id,
            error=error,
        ))
    return failures


async def publish_from_config(
    notification: Any,
    handlers: Sequence[NotificationHandler[Any]],
    config: "CqrsConfig | None" = None,
    cancellation: CancellationToken | None = None,
) -> list[NotificationFailure]:
    """``publish()`` with the strategy taken from ``config.publish_strategy``.

    Without a config the default ``"parallel"`` strategy is used.
    """
    strategy: PublishStrategy = config.publish_strategy if config is not None else "parallel"
    return await publish(notification, handlers, cancellation, strategy=strategy)
