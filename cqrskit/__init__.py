"""cqrskit: uniform results and pipeline contracts for request dispatch.

Public surface for the package.  Consumers may import from sub-modules
directly; this __init__ re-exports the most commonly used names.
"""
from cqrskit.cancellation import CancellationToken, OperationCancelledError
from cqrskit.exceptions import ConfigurationError, CqrsError, InvalidResultCodeError
from cqrskit.handlers import NotificationHandler, RequestHandler
from cqrskit.identity import (
    DataRequest,
    HasNotificationId,
    HasRequestId,
    Notification,
    Request,
)
from cqrskit.notifications import NotificationFailure, publish, publish_from_config
from cqrskit.pipeline import RequestBehavior, compose_behaviors
from cqrskit.record import ResultRecord
from cqrskit.result import DataResult, Result
from cqrskit.result_code import ResultCode

__version__ = "0.1.0"

__all__ = [
    # Results
    "ResultCode",
    "Result",
    "DataResult",
    "ResultRecord",
    # Identity
    "HasRequestId",
    "HasNotificationId",
    "Request",
    "DataRequest",
    "Notification",
    # Handlers and pipeline
    "RequestHandler",
    "NotificationHandler",
    "RequestBehavior",
    "compose_behaviors",
    "publish",
    "publish_from_config",
    "NotificationFailure",
    # Cancellation
    "CancellationToken",
    # Exceptions
    "CqrsError",
    "InvalidResultCodeError",
    "OperationCancelledError",
    "ConfigurationError",
]
