# File: src/common/exceptions/error_handlers.py

from typing import Dict, Any, Literal

import sentry_sdk

from common.exceptions.base_exception import StorageUnavailableException
from common.logging.logger import log_error

ErrorType = Literal["general", "storage", "broadcast"]


def report_failure(
    *,
    exc: Exception,
    context: Dict[str, Any],
    error_type: ErrorType = "general"
) -> None:
    """
    Log an error with its context and forward it to Sentry.

    Used for failures that must be observable but are not surfaced to the caller.
    """
    log_error(
        f"{error_type.capitalize()} error in {context.get('action', 'unknown')}",
        extra={**context, "error": str(exc), "error_class": type(exc).__name__},
        exc_info=True
    )

    with sentry_sdk.new_scope() as scope:
        scope.set_tag("error_type", error_type)
        for key, value in context.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exc)


def handle_general_error(exc: Exception, context: Dict[str, Any]) -> None:
    report_failure(exc=exc, context=context, error_type="general")


def handle_storage_error(exc: StorageUnavailableException, context: Dict[str, Any]) -> None:
    report_failure(exc=exc, context=context, error_type="storage")
