"""
Error logging for registered endpoints.

Once an endpoint is listening, errors raised by its handler or middleware
never reach the code that registered it. watch_endpoint_errors() subscribes
to each new endpoint once and forwards every error to an error logger.

Includes built-in error loggers for common patterns: logging through the
standard library (log_endpoint_error), silently ignoring
(silent_endpoint_error), and collecting errors for batch processing
(collect_endpoint_error).
"""

import logging
import sys
from typing import Any
from typing import Callable

from registrar import endpoint


logger = logging.getLogger(__name__)


ERROR_LOGGER = Callable[[str, str, Any], None]
"""
Signature for error loggers.

Error loggers receive a level name, a message and the details of the error,
usually the exception itself.
"""

WARN = "warn"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}
"""Level names accepted by log_endpoint_error, mapped to logging levels."""


def get_callable_name(callable_: Callable) -> str:
    """
    Returns the name of the callable, using class name for items with __self__,
    __name__ for anything with __name__, or str(callback) if neither are found.
    """
    if hasattr(callable_, "__self__"):
        return f"{callable_.__self__.__class__.__name__}.{callable_.__name__}"
    elif hasattr(callable_, "__name__"):
        return callable_.__name__
    else:
        return str(callable_)


def watch_endpoint_errors(endpoint_: endpoint.Endpoint, log: ERROR_LOGGER) -> None:
    """
    Forward every error of endpoint_ to log as a warning.
    Nothing here can fail or delay the registration of the endpoint.
    """

    def on_error(error: Exception) -> None:
        try:
            log(WARN, str(error), error)
        except Exception as e:
            logger.exception(
                f"Exception in endpoint error logger:\n"
                f"  Logger:    {get_callable_name(log)}\n"
                f"  Error:     {error.__class__.__name__}: {error}\n"
                f"  Exception: {e.__class__.__name__}: {e}"
            )

    endpoint_.on_error(on_error)


# -----Error Loggers-----------------------------------------------------------


def log_endpoint_error(level: str, message: str, details: Any) -> None:
    """
    Default error logger. Logs through the standard library at the given
    level, unknown levels as warnings, with the traceback when details is an
    exception.
    """
    exc_info = details if isinstance(details, BaseException) else None
    logger.log(
        LEVELS.get(level, logging.WARNING),
        f"Endpoint error: {message}",
        exc_info=exc_info,
    )


def silent_endpoint_error(_: str, __: str, ___: Any) -> None:
    """Silently ignore all endpoint errors."""


errors_caught = []


def collect_endpoint_error(level: str, message: str, details: Any) -> None:
    """
    Collect errors for batch processing.
    This appends errors caught to registrar.handlers.errors_caught which is a
    list.
    Either manage the list manually or use this function as an example to create
    a more robust error collector.
    """
    errors_caught.append(
        {
            "level": level,
            "message": message,
            "details": details,
            "exc_info": sys.exc_info(),
        }
    )
