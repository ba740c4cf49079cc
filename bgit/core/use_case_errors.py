"""Use case error handling utilities.

Provides consistent exception handling across all command use cases. Use
cases return an ExitSignal rather than raising (except for
KeyboardInterrupt/SystemExit).

Design principles:
1. KeyboardInterrupt and SystemExit are always re-raised (never caught)
2. BgitError subclasses are domain errors with user-friendly messages
3. Unexpected exceptions are logged and converted to generic failures
"""

import logging

from bgit.domain.entities import ErrorKind, ExitSignal
from bgit.domain.exceptions import BgitError

logger = logging.getLogger(__name__)


def format_error_message(exception: Exception, operation_name: str) -> str:
    """Format an exception into a user-friendly error message.

    - BgitError: Uses the error's message directly
    - OSError: Adds context about the environment
    - ValueError/RuntimeError: Includes exception message with operation context
    - Other exceptions: Returns a generic "internal error" message

    Args:
        exception: The exception that was caught.
        operation_name: Name of the operation for error messages (e.g., "ship").

    Returns:
        User-friendly error message string.
    """
    if isinstance(exception, BgitError):
        return exception.message
    elif isinstance(exception, OSError):
        return f"I/O error: {exception}. Check that git is installed and the directory is accessible."
    elif isinstance(exception, (ValueError, RuntimeError)):
        return f"{operation_name.capitalize()} error: {exception}"
    else:
        return f"Internal error during {operation_name}. Run with -v for details."


def log_use_case_error(exception: Exception, operation_name: str) -> None:
    """Log an exception from a use case with appropriate severity.

    - BgitError: DEBUG level (expected, reported to the user anyway)
    - OSError/ValueError/RuntimeError: ERROR level
    - Other exceptions: EXCEPTION level (includes traceback)
    """
    if isinstance(exception, BgitError):
        logger.debug("%s failed: %s (%s)", operation_name, exception.message, exception.kind.value)
    elif isinstance(exception, (OSError, ValueError, RuntimeError)):
        logger.error(f"Error during {operation_name}: {exception}")
    else:
        logger.exception(f"Unexpected error during {operation_name}")


def signal_from_exception(exception: Exception, operation_name: str) -> ExitSignal:
    """Convert any exception into a typed failure ExitSignal."""
    log_use_case_error(exception, operation_name)
    message = format_error_message(exception, operation_name)
    if isinstance(exception, BgitError):
        return ExitSignal.failure(
            exception.kind,
            message,
            hint=exception.hint,
            detail=exception.detail,
        )
    return ExitSignal.failure(ErrorKind.SUBPROCESS_FAILURE, message)

