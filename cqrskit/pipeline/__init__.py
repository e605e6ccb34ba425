"""Behavior chain package.

Exports the pipeline building blocks so call sites import from one stable
namespace::

    from cqrskit.pipeline import (
        RequestBehavior, compose_behaviors, default_behaviors,
        LoggingBehavior, ValidationBehavior, ExceptionGuardBehavior,
    )
"""
from __future__ import annotations

from cqrskit.pipeline.chain import RequestBehavior, compose_behaviors
from cqrskit.pipeline.defaults import default_behaviors
from cqrskit.pipeline.exception_guard import ExceptionGuardBehavior
from cqrskit.pipeline.log import LoggingBehavior
from cqrskit.pipeline.validation import (
    ValidationBehavior,
    errors_from_pydantic,
    pydantic_validator,
)

__all__ = [
    "RequestBehavior",
    "compose_behaviors",
    "default_behaviors",
    "LoggingBehavior",
    "ValidationBehavior",
    "ExceptionGuardBehavior",
    "errors_from_pydantic",
    "pydantic_validator",
]
