"""Tests for default_behaviors()."""
from __future__ import annotations

from dataclasses import dataclass

import pytest

from cqrskit.config import CqrsConfig
from cqrskit.identity import Request
from cqrskit.pipeline import (
    ExceptionGuardBehavior,
    LoggingBehavior,
    ValidationBehavior,
    compose_behaviors,
    default_behaviors,
)
from cqrskit.result import Result


@dataclass(frozen=True)
class Rename(Request):
    name: str = ""


def require_name(request: Rename) -> dict[str, list[str]]:
    return {} if request.name else {"name": ["required"]}


class _EchoHandler:
    async def handle(self, request, cancellation) -> Result:
        return Result.success(correlation_id=request.request_id)


def test_logging_only_by_default() -> None:
    behaviors = default_behaviors()
    assert len(behaviors) == 1
    assert isinstance(behaviors[0], LoggingBehavior)


def test_full_ordering() -> None:
    async def extra(request, next, cancellation):
        return await next(request)

    behaviors = default_behaviors(
        CqrsConfig(slow_request_threshold_ms=250),
        [require_name],
        guard_exceptions=True,
        extra=[extra],
    )
    assert isinstance(behaviors[0], LoggingBehavior)
    assert isinstance(behaviors[1], ExceptionGuardBehavior)
    assert isinstance(behaviors[2], ValidationBehavior)
    assert behaviors[3] is extra
    assert behaviors[0]._slow_threshold_ms == 250


@pytest.mark.asyncio
async def test_default_chain_validates_and_dispatches() -> None:
    chain = compose_behaviors(default_behaviors(validators=[require_name]), _EchoHandler())

    rejected = await chain(Rename())
    accepted_request = Rename(name="new")
    accepted = await chain(accepted_request)

    assert rejected.is_failure
    assert rejected.errors["name"] == ("required",)
    assert accepted.is_success
    assert accepted.correlation_id == accepted_request.request_id
