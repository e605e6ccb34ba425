"""Standard behavior ordering built from a CqrsConfig.

    LoggingBehavior → [ExceptionGuardBehavior] → [ValidationBehavior] → extra...

Logging is outermost so its timing covers the whole chain.  The exception
guard is opt-in because fault translation is the dispatch engine's call.
"""
from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

from cqrskit.pipeline.chain import RequestBehavior
from cqrskit.pipeline.exception_guard import ExceptionGuardBehavior
from cqrskit.pipeline.log import LoggingBehavior
from cqrskit.pipeline.validation import ValidationBehavior, Validator

if TYPE_CHECKING:
    from cqrskit.config import CqrsConfig


def default_behaviors(
    config: "CqrsConfig | None" = None,
    validators: Sequence[Validator] = (),
    *,
    guard_exceptions: bool = False,
    extra: Sequence[RequestBehavior] = (),
) -> list[RequestBehavior]:
    """Return the standard behavior list for ``compose_behaviors()``.

    Args:
        config:           Supplies ``slow_request_threshold_ms``.  Optional.
        validators:       Validators for a ``ValidationBehavior``; omitted when empty.
        guard_exceptions: Add an ``ExceptionGuardBehavior`` after logging.
        extra:            Caller behaviors appended innermost, in order.
    """
    threshold = config.slow_request_threshold_ms if config is not None else None
    behaviors: list[RequestBehavior] = [LoggingBehavior(slow_threshold_ms=threshold)]
    if guard_exceptions:
        behaviors.append(ExceptionGuardBehavior())
    if validators:
        behaviors.append(ValidationBehavior(validators))
    behaviors.extend(extra)
    return behaviors
