"""ResultCode: the (code, category, description) triple naming an outcome.

The numeric ``code`` is for fast comparisons (``code == 0`` means success).
The rendered string ``"{category}{code}"`` is the stable machine identifier
that crosses service boundaries: integers may be reused across categories,
the rendered strings may not.

Built-in codes live in the default category ``"DF"``::

    str(ResultCode.SUCCESS)    == "DF0"
    str(ResultCode.EXCEPTION)  == "DF1"
    str(ResultCode.FAILURE)    == "DF2"
    str(ResultCode.CANCELLED)  == "DF3"
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

DEFAULT_CATEGORY = "DF"
CUSTOM_CATEGORY = "CUSTOM"


@dataclass(frozen=True)
class ResultCode:
    """Immutable result code.

    Attributes:
        code:        Stable numeric identifier, unique within ``category``.
        category:    Short tag grouping related codes.  Defaults to ``"DF"``.
        description: Optional human-readable text copied onto results.
    """

    code: int
    category: str = DEFAULT_CATEGORY
    description: str | None = None

    SUCCESS: ClassVar["ResultCode"]
    EXCEPTION: ClassVar["ResultCode"]
    FAILURE: ClassVar["ResultCode"]
    CANCELLED: ClassVar["ResultCode"]

    @classmethod
    def instance(
        cls,
        code: int,
        category: str = DEFAULT_CATEGORY,
        description: str | None = None,
    ) -> "ResultCode":
        """Open factory for caller-defined codes.  Stores the triple as given."""
        return cls(code=code, category=category, description=description)

    @classmethod
    def custom(cls, code: int, description: str | None = None) -> "ResultCode":
        """Build an ad-hoc code in the ``CUSTOM`` category (renders ``CUSTOM{code}``)."""
        return cls(code=code, category=CUSTOM_CATEGORY, description=description)

    @property
    def is_success(self) -> bool:
        return self.code == 0

    def __str__(self) -> str:
        return f"{self.category or DEFAULT_CATEGORY}{self.code}"


ResultCode.SUCCESS = ResultCode(0, DEFAULT_CATEGORY, "Success")
ResultCode.EXCEPTION = ResultCode(1, DEFAULT_CATEGORY, "Exception")
ResultCode.FAILURE = ResultCode(2, DEFAULT_CATEGORY, "Failure")
ResultCode.CANCELLED = ResultCode(3, DEFAULT_CATEGORY, "Cancelled")
