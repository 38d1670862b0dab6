"""
Graceful failure utilities.

Some operations must never break the request that triggered them. Reading
back stored screening results is the main case: a record written by an older
version, or edited by hand, should be skipped with a log line rather than
turn the whole results page into a 500.

These helpers run an operation, log any exception with context, and carry
on. They are distinct from the persistence error handling in
app.core.result_store, where failures roll back and propagate.

Usage:
    from app.core.graceful_failure import graceful_failure, graceful_failure_decorator

    with graceful_failure("decode stored result", logger, context={"row_id": row.id}):
        record = decode(row.payload)

    @graceful_failure_decorator("parse stored result", default=None)
    def parse_stored_record(payload: str) -> Optional[dict]:
        ...
"""

import logging
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Dict, Generator, Optional, TypeVar

T = TypeVar("T")


@contextmanager
def graceful_failure(
    operation_name: str,
    logger: logging.Logger,
    *,
    log_level: int = logging.WARNING,
    exc_info: bool = False,
    context: Optional[Dict[str, Any]] = None,
) -> Generator[None, None, None]:
    """Run a non-critical block, logging and swallowing any exception.

    Args:
        operation_name: Human-readable name used in the log message
            (e.g. "decode stored result").
        logger: Logger that receives the failure message.
        log_level: Level of the failure message. Defaults to WARNING.
        exc_info: Include the traceback in the log entry.
        context: Extra key/value pairs appended to the message
            (e.g. {"row_id": 12}).

    Example:
        >>> with graceful_failure("decode stored result", logger):
        ...     record = json.loads(payload)
    """
    try:
        yield
    except Exception as e:
        if context:
            context_str = ", ".join(f"{k}={v}" for k, v in context.items())
            message = f"Failed to {operation_name} ({context_str}): {e}"
        else:
            message = f"Failed to {operation_name}: {e}"
        logger.log(log_level, message, exc_info=exc_info)


class GracefulFailureDecorator:
    """Decorator form of graceful_failure for whole functions.

    The decorated function returns `default` when its body raises.

    Usage:
        @graceful_failure_decorator("parse stored result")
        def parse_stored_record(payload: str) -> Optional[dict]:
            ...
    """

    def __init__(
        self,
        operation_name: str,
        *,
        logger: Optional[logging.Logger] = None,
        log_level: int = logging.WARNING,
        exc_info: bool = False,
        default: Any = None,
    ):
        """Initialize the decorator.

        Args:
            operation_name: Human-readable name of the operation.
            logger: Logger to use. Defaults to the decorated function's
                module logger.
            log_level: Logging level for failures. Defaults to WARNING.
            exc_info: Whether to include the stack trace.
            default: Value returned when the function raises.
        """
        self.operation_name = operation_name
        self._logger = logger
        self.log_level = log_level
        self.exc_info = exc_info
        self.default = default

    def __call__(self, func: Callable[..., T]) -> Callable[..., Optional[T]]:
        """Wrap func with graceful failure handling."""

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
            logger = self._logger or logging.getLogger(func.__module__)

            with graceful_failure(
                self.operation_name,
                logger,
                log_level=self.log_level,
                exc_info=self.exc_info,
            ):
                return func(*args, **kwargs)

            return self.default

        return wrapper


graceful_failure_decorator = GracefulFailureDecorator
