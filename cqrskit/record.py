"""ResultRecord: Pydantic snapshot of a Result as primitive data.

``Result`` is a frozen dataclass with no serialisation of its own.  Whenever a
result has to leave the process (an HTTP response body, a log line, an audit
trail) it is copied into a ``ResultRecord`` first, which validates that every
field is representable as integers, strings, string-keyed lists of strings
and an opaque id.
"""
from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from cqrskit.result import DataResult, Result


class ResultRecord(BaseModel):
    """Serialisable copy of a ``Result`` / ``DataResult``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    code: int = Field(..., description="Numeric code; 0 means success")
    categorized_code: str = Field(..., description="Category + code, e.g. 'DF2'")
    description: str | None = Field(default=None, description="Human-readable text")
    errors: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Field name -> ordered violation messages",
    )
    correlation_id: UUID | None = Field(
        default=None,
        description="Id of the request or notification that produced the result",
    )
    has_data: bool = Field(default=False, description="True when copied from a DataResult")
    data: Any = Field(default=None, description="DataResult payload, if any")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_success(self) -> bool:
        """Derived from ``code == 0``; serialised but never read from input."""
        return self.code == 0

    @classmethod
    def from_result(cls, result: Result) -> "ResultRecord":
        """Copy *result* into a record."""
        has_data = isinstance(result, DataResult)
        return cls(
            code=result.code,
            categorized_code=result.categorized_code,
            description=result.description,
            errors={key: list(messages) for key, messages in result.errors.items()},
            correlation_id=result.correlation_id,
            has_data=has_data,
            data=result.data if has_data else None,
        )

    def to_result(self) -> Result:
        """Rebuild the ``Result`` (or ``DataResult``) this record was copied from."""
        fields: dict[str, Any] = {
            "code": self.code,
            "categorized_code": self.categorized_code,
            "description": self.description,
            "errors": self.errors,
            "correlation_id": self.correlation_id,
        }
        if self.has_data:
            return DataResult(data=self.data, **fields)
        return Result(**fields)
