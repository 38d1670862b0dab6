"""
Exceptions raised by the screening engine.

All engine failures are contract violations by the caller, never transient
conditions, so none of them are retried. The API layer maps them onto HTTP
responses (see app.core.error_responses).
"""

from typing import Optional


class ScreeningError(Exception):
    """Base class for screening engine errors."""


class InvalidArgumentError(ScreeningError, ValueError):
    """Raised when an operation receives input it cannot score.

    Examples: classifying an empty result list, grading a question whose
    kind the grader does not recognise.
    """


class InvalidStateError(ScreeningError, RuntimeError):
    """Raised when an operation is not allowed in the current state.

    Examples: submitting outside the responding phase, stopping a timing
    recorder that was never started.
    """


class TestNotFoundError(ScreeningError, LookupError):
    """Raised when a test id is not present in the catalog."""

    __test__ = False

    def __init__(self, test_id: str):
        self.test_id = test_id
        super().__init__(f"Unknown test id: {test_id!r}")


class ResultPersistenceError(ScreeningError):
    """Raised when a completed assessment record could not be stored.

    Attributes:
        operation_name: Human-readable name of the failed operation
        original_error: The underlying storage exception
    """

    def __init__(
        self,
        operation_name: str,
        original_error: Exception,
        message: Optional[str] = None,
    ):
        self.operation_name = operation_name
        self.original_error = original_error
        self.message = message or f"Failed to {operation_name}: {original_error}"
        super().__init__(self.message)
