"""Identity contract for requests and notifications.

Every request carries a ``request_id`` and every notification carries a
``notification_id``.  The id is generated once, by ``uuid4``, when the
message is constructed, and is stored as a field: reading it twice returns
the same value.  It is the value stamped into ``Result.correlation_id`` so
callers can match failures, logs and notifications back to the message.

The protocols are structural.  Any object exposing the attribute satisfies
them; the dataclass bases below are a convenience, not a requirement::

    @dataclass(frozen=True)
    class CreateUser(DataRequest[UUID]):
        email: str

    cmd = CreateUser(email="a@example.com")
    cmd.request_id == cmd.request_id   # always True
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Generic, Protocol, TypeVar, runtime_checkable
from uuid import UUID, uuid4

from cqrskit.result import DataResult, ErrorsInput, Result
from cqrskit.result_code import ResultCode

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

@runtime_checkable
class HasRequestId(Protocol):
    """Any request routed through a behavior chain."""

    request_id: UUID


@runtime_checkable
class HasNotificationId(Protocol):
    """Any notification delivered to notification handlers."""

    notification_id: UUID


# ---------------------------------------------------------------------------
# Convenience bases
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Request:
    """Base for requests whose handler returns a plain ``Result``.

    ``result_type`` is the class the handler returns.  Behaviors use
    ``fail()`` to synthesise a failure of that shape without knowing the
    concrete handler.
    """

    result_type: ClassVar[type[Result]] = Result

    request_id: UUID = field(default_factory=uuid4, kw_only=True)

    def fail(self, result_code: ResultCode, errors: ErrorsInput | None = None) -> Result:
        """Build a failure of this request's result type, stamped with ``request_id``."""
        return self.result_type.failure(
            result_code, errors=errors, correlation_id=self.request_id
        )


@dataclass(frozen=True)
class DataRequest(Request, Generic[T]):
    """Base for requests whose handler returns ``DataResult[T]``."""

    result_type: ClassVar[type[Result]] = DataResult


@dataclass(frozen=True)
class Notification:
    """Base for notifications fanned out to zero or more handlers."""

    notification_id: UUID = field(default_factory=uuid4, kw_only=True)


def correlation_id_of(message: object) -> UUID | None:
    """Return the request or notification id of *message*, if it has one."""
    if isinstance(message, HasRequestId):
        return message.request_id
    if isinstance(message, HasNotificationId):
        return message.notification_id
    return None


def fail_for(
    request: object,
    result_code: ResultCode,
    errors: ErrorsInput | None = None,
) -> Result:
    """Build a failure for any request, using its ``fail()`` when it has one.

    Requests that only satisfy ``HasRequestId`` (no ``fail()`` capability) get
    a plain ``Result`` failure stamped with their id.
    """
    fail = getattr(request, "fail", None)
    if callable(fail):
        return fail(result_code, errors)
    return Result.failure(result_code, errors=errors, correlation_id=correlation_id_of(request))
