"""Tests for compose_behaviors() and the RequestBehavior contract.

Coverage:
- Call order: behaviors execute in declared order around the handler.
- Short-circuit: a behavior returning without calling next stops the chain.
- Pass-through: transparent behaviors return the handler's Result unchanged.
- Cancellation surfaces as a CANCELLED failure, never as an exception.
- Exceptions other than cancellation propagate through the chain.
"""
from __future__ import annotations

from dataclasses import dataclass

import pytest

from cqrskit.cancellation import CancellationToken
from cqrskit.handlers import RequestHandler
from cqrskit.identity import DataRequest, Request
from cqrskit.pipeline.chain import compose_behaviors
from cqrskit.result import DataResult, Result
from cqrskit.result_code import ResultCode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Ping(Request):
    text: str = "ping"


@dataclass(frozen=True)
class Lookup(DataRequest[str]):
    key: str = "k"


class _RecordingHandler:
    """Handler stub that records invocations and returns a fixed Result."""

    def __init__(self, result: Result | None = None) -> None:
        self.calls: list[object] = []
        self.tokens: list[CancellationToken] = []
        self._result = result

    async def handle(self, request, cancellation: CancellationToken) -> Result:
        self.calls.append(request)
        self.tokens.append(cancellation)
        if self._result is not None:
            return self._result
        return Result.success(correlation_id=request.request_id)


class _RecordingBehavior:
    def __init__(self, name: str, log: list[str]) -> None:
        self._name = name
        self._log = log

    async def __call__(self, request, next, cancellation):
        self._log.append(f"{self._name}:pre")
        result = await next(request)
        self._log.append(f"{self._name}:post")
        return result


class _ShortCircuitBehavior:
    def __init__(self, log: list[str]) -> None:
        self._log = log
        self.returned: Result | None = None

    async def __call__(self, request, next, cancellation):
        self._log.append("short")
        self.returned = request.fail(ResultCode.FAILURE, {"text": ["rejected"]})
        return self.returned


# ---------------------------------------------------------------------------
# Tests: ordering and pass-through
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_call_order_three_behaviors() -> None:
    """Behaviors must run in declared order (outermost first)."""
    order: list[str] = []
    chain = compose_behaviors(
        [_RecordingBehavior("A", order), _RecordingBehavior("B", order), _RecordingBehavior("C", order)],
        _RecordingHandler(),
    )
    await chain(Ping())
    assert order == ["A:pre", "B:pre", "C:pre", "C:post", "B:post", "A:post"]


@pytest.mark.asyncio
async def test_pass_through_returns_handler_result_unchanged() -> None:
    expected = Result.success(ResultCode.instance(0, "PNG", "Pong"))
    handler = _RecordingHandler(expected)
    order: list[str] = []
    chain = compose_behaviors([_RecordingBehavior("A", order), _RecordingBehavior("B", order)], handler)
    result = await chain(Ping())
    assert result is expected


@pytest.mark.asyncio
async def test_empty_chain_calls_handler_directly() -> None:
    expected = Result.success()
    handler = _RecordingHandler(expected)
    chain = compose_behaviors([], handler)
    request = Ping()
    result = await chain(request)
    assert result is expected
    assert handler.calls == [request]


@pytest.mark.asyncio
async def test_plain_function_behavior() -> None:
    """An async function satisfies the behavior contract."""
    seen: list[str] = []

    async def tag(request, next, cancellation):
        seen.append(type(request).__name__)
        return await next(request)

    chain = compose_behaviors([tag], _RecordingHandler())
    result = await chain(Ping())
    assert result.is_success
    assert seen == ["Ping"]


@pytest.mark.asyncio
async def test_chain_is_reusable() -> None:
    handler = _RecordingHandler()
    chain = compose_behaviors([], handler)
    first, second = Ping(), Ping()
    r1 = await chain(first)
    r2 = await chain(second)
    assert r1.correlation_id == first.request_id
    assert r2.correlation_id == second.request_id


# ---------------------------------------------------------------------------
# Tests: short-circuit
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_short_circuit_skips_rest_of_chain() -> None:
    """[A (short-circuits), B, Handler]: B and Handler never run."""
    log: list[str] = []
    a = _ShortCircuitBehavior(log)
    handler = _RecordingHandler()
    chain = compose_behaviors([a, _RecordingBehavior("B", log)], handler)

    request = Ping()
    result = await chain(request)

    assert log == ["short"]
    assert handler.calls == []
    assert result is a.returned
    assert result.is_failure
    assert result.correlation_id == request.request_id


@pytest.mark.asyncio
async def test_short_circuit_matches_data_request_shape() -> None:
    log: list[str] = []
    chain = compose_behaviors([_ShortCircuitBehavior(log)], _RecordingHandler())
    result = await chain(Lookup())
    assert isinstance(result, DataResult)
    assert result.data is None


@pytest.mark.asyncio
async def test_outer_behavior_sees_inner_short_circuit() -> None:
    log: list[str] = []
    chain = compose_behaviors(
        [_RecordingBehavior("A", log), _ShortCircuitBehavior(log)],
        _RecordingHandler(),
    )
    result = await chain(Ping())
    assert log == ["A:pre", "short", "A:post"]
    assert result.categorized_code == "DF2"


# ---------------------------------------------------------------------------
# Tests: cancellation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_token_threaded_to_every_link() -> None:
    seen: list[CancellationToken] = []

    async def capture(request, next, cancellation):
        seen.append(cancellation)
        return await next(request)

    handler = _RecordingHandler()
    token = CancellationToken()
    chain = compose_behaviors([capture, capture], handler)
    await chain(Ping(), token)
    assert seen == [token, token]
    assert handler.tokens == [token]


@pytest.mark.asyncio
async def test_default_token_when_none_given() -> None:
    handler = _RecordingHandler()
    await compose_behaviors([], handler)(Ping())
    assert isinstance(handler.tokens[0], CancellationToken)
    assert handler.tokens[0].cancelled is False


@pytest.mark.asyncio
async def test_pre_cancelled_token_returns_cancelled_result() -> None:
    handler = _RecordingHandler()
    log: list[str] = []
    token = CancellationToken()
    token.cancel("shutdown")
    request = Ping()

    result = await compose_behaviors([_RecordingBehavior("A", log)], handler)(request, token)

    assert result.is_failure
    assert result.code == ResultCode.CANCELLED.code
    assert result.categorized_code == "DF3"
    assert result.errors["cancellation"] == ("shutdown",)
    assert result.correlation_id == request.request_id
    assert log == []
    assert handler.calls == []


@pytest.mark.asyncio
async def test_cancel_mid_chain_stops_before_handler() -> None:
    log: list[str] = []

    async def cancel_here(request, next, cancellation):
        cancellation.cancel()
        return await next(request)

    handler = _RecordingHandler()
    chain = compose_behaviors([_RecordingBehavior("A", log), cancel_here], handler)
    result = await chain(Ping(), CancellationToken())

    assert handler.calls == []
    assert result.categorized_code == "DF3"
    assert log == ["A:pre", "A:post"]
    assert dict(result.errors) == {}


@pytest.mark.asyncio
async def test_handler_raising_cancelled_error_becomes_result() -> None:
    class _ObservingHandler:
        async def handle(self, request, cancellation):
            cancellation.cancel("deadline")
            cancellation.raise_if_cancelled()
            return Result.success()

    result = await compose_behaviors([], _ObservingHandler())(Lookup(), CancellationToken())
    assert isinstance(result, DataResult)
    assert result.code == ResultCode.CANCELLED.code
    assert result.errors["cancellation"] == ("deadline",)


# ---------------------------------------------------------------------------
# Tests: exception propagation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_exception_propagates_through_chain() -> None:
    class _BangHandler:
        async def handle(self, request, cancellation):
            raise ValueError("boom")

    log: list[str] = []
    chain = compose_behaviors([_RecordingBehavior("A", log)], _BangHandler())
    with pytest.raises(ValueError, match="boom"):
        await chain(Ping())
    assert log == ["A:pre"]


@pytest.mark.asyncio
async def test_outer_behavior_can_catch_inner_exception() -> None:
    async def catching(request, next, cancellation):
        try:
            return await next(request)
        except ValueError:
            return request.fail(ResultCode.EXCEPTION)

    class _BangHandler:
        async def handle(self, request, cancellation):
            raise ValueError("inner boom")

    result = await compose_behaviors([catching], _BangHandler())(Ping())
    assert result.categorized_code == "DF1"


def test_recording_handler_satisfies_protocol() -> None:
    assert isinstance(_RecordingHandler(), RequestHandler)
