"""Cooperative cancellation signal threaded through handlers and behaviors.

A ``CancellationToken`` is passed down every link of a behavior chain and to
every notification handler.  Observing it is each handler's responsibility;
the chain itself checks it between links and turns an observed cancellation
into a ``ResultCode.CANCELLED`` failure result instead of raising past the
chain boundary.

This is independent of ``asyncio`` task cancellation, which keeps its normal
``CancelledError`` semantics.
"""
from __future__ import annotations

import asyncio
import logging

from cqrskit.exceptions import CqrsError

logger = logging.getLogger(__name__)


class OperationCancelledError(CqrsError):
    """Raised by ``CancellationToken.raise_if_cancelled()``.

    Attributes:
        reason: Optional text passed to ``cancel()``.
    """

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Operation cancelled{detail}")


class CancellationToken:
    """One-shot cancellation flag that coroutines can poll or await.

    Example::

        token = CancellationToken()
        ...
        token.cancel("client disconnected")
        ...
        token.raise_if_cancelled()   # raises OperationCancelledError
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason = ""
        self._event: asyncio.Event | None = None

    @classmethod
    def none(cls) -> "CancellationToken":
        """Return a fresh token that nobody holds a reference to cancel."""
        return cls()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self, reason: str = "") -> None:
        """Signal cancellation.  Idempotent; the first reason is kept."""
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason
        logger.debug("Cancellation requested%s", f": {reason}" if reason else "")
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ``OperationCancelledError`` if ``cancel()`` has been called."""
        if self._cancelled:
            raise OperationCancelledError(self._reason)

    async def wait(self) -> None:
        """Suspend until ``cancel()`` is called."""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"CancellationToken({state})"
