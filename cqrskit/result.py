"""Result model returned by every request handler and behavior.

Every ``RequestHandler.handle()`` call returns a ``Result`` (or the typed
``DataResult[T]``).  Behaviors in the pipeline return the same type, so a
behavior can short-circuit by returning its own failure without any sentinel.

Design notes:
- Frozen dataclass (not Pydantic) because a Result is an in-memory value
  object, immutable after construction.  ``record.ResultRecord`` is the
  Pydantic snapshot used when a result has to be serialised.
- ``is_success`` is derived from ``code == 0``; there is no stored flag.
- ``errors`` has one canonical shape: field name -> ordered messages.  It is
  frozen into a read-only mapping of tuples at construction and is never
  ``None``, so callers can iterate it unconditionally.
- Build results through ``success()`` / ``failure()``.  Once returned, a
  result is never mutated; ``with_correlation_id()`` returns a copy.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, Iterable, Mapping, TypeVar
from uuid import UUID

from cqrskit.exceptions import InvalidResultCodeError
from cqrskit.result_code import ResultCode

T = TypeVar("T")
_R = TypeVar("_R", bound="Result")

ErrorMap = Mapping[str, tuple[str, ...]]
ErrorsInput = Mapping[str, "Iterable[str] | str"]


def normalize_errors(errors: ErrorsInput | None) -> ErrorMap:
    """Return *errors* as a read-only ``field -> tuple[str, ...]`` mapping.

    A bare string value is treated as a single message.  ``None`` becomes an
    empty mapping.  Message order is preserved.  Fields with no messages are
    dropped, so an empty mapping always means "no errors".

    Raises:
        TypeError: A value is itself a mapping (the nested error shape).
    """
    if not errors:
        return MappingProxyType({})
    frozen: dict[str, tuple[str, ...]] = {}
    for key, messages in errors.items():
        if isinstance(messages, str):
            frozen[str(key)] = (messages,)
            continue
        if isinstance(messages, Mapping):
            raise TypeError(
                f"Errors for '{key}' must be a message or a sequence of messages, "
                f"not a mapping"
            )
        normalized = tuple(str(m) for m in messages)
        if normalized:
            frozen[str(key)] = normalized
    return MappingProxyType(frozen)


def merge_errors(*error_maps: ErrorsInput | None) -> ErrorMap:
    """Merge several error maps, concatenating messages for repeated fields.

    Duplicate messages for the same field are kept once, first occurrence wins.
    """
    merged: dict[str, list[str]] = {}
    for error_map in error_maps:
        for key, messages in normalize_errors(error_map).items():
            bucket = merged.setdefault(key, [])
            for message in messages:
                if message not in bucket:
                    bucket.append(message)
    return normalize_errors(merged)


@dataclass(frozen=True)
class Result:
    """Immutable outcome of handling one request.

    Attributes:
        code:             Numeric code; ``0`` means success.
        categorized_code: ``str(ResultCode)`` captured at construction, e.g. ``"DF2"``.
        description:      Human-readable text from the result code.
        errors:           Field name -> ordered violation messages.  Empty on success.
        correlation_id:   Id of the request/notification that produced this result.
    """

    code: int
    categorized_code: str
    description: str | None = None
    errors: ErrorMap = field(default_factory=dict, hash=False)
    correlation_id: UUID | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", normalize_errors(self.errors))

    # ------------------------------------------------------------------
    # Derived status
    # ------------------------------------------------------------------

    @property
    def is_success(self) -> bool:
        return self.code == 0

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def success(
        cls: type[_R],
        result_code: ResultCode | None = None,
        correlation_id: UUID | None = None,
    ) -> _R:
        """Build a success result.

        Args:
            result_code:    Code to copy from.  Defaults to ``ResultCode.SUCCESS``.
            correlation_id: Optional id of the triggering message.
        """
        rc = result_code if result_code is not None else ResultCode.SUCCESS
        return cls(
            code=rc.code,
            categorized_code=str(rc),
            description=rc.description,
            correlation_id=correlation_id,
        )

    @classmethod
    def failure(
        cls: type[_R],
        result_code: ResultCode,
        errors: ErrorsInput | None = None,
        correlation_id: UUID | None = None,
    ) -> _R:
        """Build a failure result.

        Args:
            result_code:    Reason for the failure.  Required; must not be a
                            success code.
            errors:         Optional field -> messages map.  Defaults to empty.
            correlation_id: Optional id of the triggering message.

        Raises:
            InvalidResultCodeError: If ``result_code.code == 0``.
        """
        if result_code.is_success:
            raise InvalidResultCodeError(result_code)
        return cls(
            code=result_code.code,
            categorized_code=str(result_code),
            description=result_code.description,
            errors=normalize_errors(errors),
            correlation_id=correlation_id,
        )

    # ------------------------------------------------------------------
    # Copies and conversion
    # ------------------------------------------------------------------

    def with_correlation_id(self: _R, correlation_id: UUID | None) -> _R:
        """Return a copy of this result stamped with *correlation_id*."""
        return dataclasses.replace(self, correlation_id=correlation_id)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain-data representation (ints, strings, lists, str id)."""
        return {
            "code": self.code,
            "categorized_code": self.categorized_code,
            "description": self.description,
            "is_success": self.is_success,
            "errors": {key: list(messages) for key, messages in self.errors.items()},
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
        }


@dataclass(frozen=True)
class DataResult(Result, Generic[T]):
    """``Result`` carrying a payload on success.

    ``data`` is ``None`` on failures built through ``failure()``.  Do not use
    ``data is None`` to detect failure; only ``is_success`` does that.
    """

    data: T | None = field(default=None, hash=False)

    @classmethod
    def success(  # type: ignore[override]
        cls,
        data: T | None = None,
        result_code: ResultCode | None = None,
        correlation_id: UUID | None = None,
    ) -> "DataResult[T]":
        """Build a success result carrying *data*."""
        rc = result_code if result_code is not None else ResultCode.SUCCESS
        return cls(
            code=rc.code,
            categorized_code=str(rc),
            description=rc.description,
            correlation_id=correlation_id,
            data=data,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["data"] = self.data
        return payload
