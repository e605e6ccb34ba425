"""ValidationBehavior: short-circuits requests that fail validation.

On each call:
1. Runs every validator against the request, in order.
2. A validator returns a ``field -> messages`` mapping (empty or ``None`` when
   the request is valid), sync or async.  It may instead raise a pydantic
   ``ValidationError``, whose entries are folded into the same flat shape
   (``loc`` joined with ``"."`` -> ``msg``).
3. If any messages were collected, returns ``request.fail(failure_code, errors)``
   without calling ``next``: later behaviors and the handler never run.
4. Otherwise calls ``next(request)`` and returns its Result unchanged.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence, TYPE_CHECKING, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cqrskit.identity import correlation_id_of, fail_for
from cqrskit.result import ErrorsInput, merge_errors
from cqrskit.result_code import ResultCode

if TYPE_CHECKING:
    from cqrskit.cancellation import CancellationToken
    from cqrskit.result import Result

logger = logging.getLogger(__name__)

ValidatorResult = Union[ErrorsInput, None]
Validator = Callable[[Any], Union[ValidatorResult, Awaitable[ValidatorResult]]]

ROOT_ERROR_KEY = "__root__"


def errors_from_pydantic(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Flatten a pydantic ``ValidationError`` into ``field -> messages``."""
    errors: dict[str, list[str]] = {}
    for entry in exc.errors():
        key = ".".join(str(part) for part in entry.get("loc", ())) or ROOT_ERROR_KEY
        errors.setdefault(key, []).append(entry.get("msg", "Invalid value"))
    return errors


def pydantic_validator(model: type[BaseModel]) -> Validator:
    """Return a validator that checks the request's attributes against *model*.

    The request is read with ``from_attributes=True``, so any object whose
    attributes match the model's fields can be validated (dataclass requests
    included).
    """

    def validate(request: Any) -> None:
        model.model_validate(request, from_attributes=True)
        return None

    validate.__name__ = f"validate_{model.__name__}"
    return validate


class ValidationBehavior:
    """Runs validators and short-circuits with a failure on any error.

    Args:
        validators:   Ordered validator callables.
        failure_code: Result code for the short-circuit failure.  Defaults to
                      ``ResultCode.FAILURE``.
    """

    def __init__(
        self,
        validators: Sequence[Validator],
        failure_code: ResultCode = ResultCode.FAILURE,
    ) -> None:
        self._validators = list(validators)
        self._failure_code = failure_code

    async def _run_validator(self, validator: Validator, request: Any) -> Mapping[str, Any]:
        try:
            outcome = validator(request)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except PydanticValidationError as exc:
            return errors_from_pydantic(exc)
        return outcome or {}

    async def __call__(
        self,
        request: Any,
        next: Callable[[Any], Awaitable["Result"]],
        cancellation: "CancellationToken",
    ) -> "Result":
        """Validate *request*; proceed only when no errors were collected."""
        collected = [await self._run_validator(v, request) for v in self._validators]
        errors = merge_errors(*collected)
        if errors:
            logger.info(
                "Request %s (%s) failed validation on %d field(s): %s",
                correlation_id_of(request),
                type(request).__name__,
                len(errors),
                ", ".join(errors),
            )
            return fail_for(request, self._failure_code, errors)
        return await next(request)
