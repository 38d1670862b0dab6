"""
Error messages and HTTPException builders for the screening API.

Every endpoint reports the same failure with the same message and status.
Messages use sentence case, end with a period and put identifiers in
parentheses: "Screening test not found (ID: reading-6-9)."

Screening engine errors map onto status codes as follows:

    TestNotFoundError / unknown session  -> 404
    InvalidStateError                    -> 409
    InvalidArgumentError                 -> 400
    ResultPersistenceError               -> 500

Usage:
    from app.core.error_responses import ErrorMessages, raise_for_screening_error

    try:
        session.submit(answer)
    except ScreeningError as e:
        raise_for_screening_error(e)
"""

from typing import NoReturn

from fastapi import HTTPException, status

from app.core.screening.errors import (
    InvalidArgumentError,
    InvalidStateError,
    ResultPersistenceError,
    ScreeningError,
    TestNotFoundError,
)


class ErrorMessages:
    """User-facing error messages.

    Constants for fixed messages, static methods for messages that take
    parameters.
    """

    NO_RESULTS_FOUND = "No screening results found."
    RESULT_SAVE_FAILED = "Failed to save screening results. Please try again later."
    INTERNAL_ERROR = "An internal server error occurred."

    @staticmethod
    def test_not_found(test_id: str) -> str:
        return f"Screening test not found (ID: {test_id})."

    @staticmethod
    def session_not_found(session_id: str) -> str:
        return f"Screening session not found (ID: {session_id})."

    @staticmethod
    def invalid_session_state(reason: str) -> str:
        """Message for a session action that is not allowed in its current phase."""
        return f"Session action not allowed: {reason}."

    @staticmethod
    def invalid_answer(reason: str) -> str:
        return f"Answer could not be graded: {reason}."


def _raise(status_code: int, detail: str) -> NoReturn:
    raise HTTPException(status_code=status_code, detail=detail)


def raise_bad_request(detail: str) -> NoReturn:
    """Raise a 400 Bad Request."""
    _raise(status.HTTP_400_BAD_REQUEST, detail)


def raise_not_found(detail: str) -> NoReturn:
    """Raise a 404 Not Found."""
    _raise(status.HTTP_404_NOT_FOUND, detail)


def raise_conflict(detail: str) -> NoReturn:
    """Raise a 409 Conflict: the session is in the wrong phase for the request."""
    _raise(status.HTTP_409_CONFLICT, detail)


def raise_server_error(detail: str) -> NoReturn:
    """Raise a 500 Internal Server Error."""
    _raise(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


def raise_for_screening_error(error: ScreeningError) -> NoReturn:
    """
    Re-raise a screening engine error as the matching HTTPException.

    Persistence failures get the generic save message; the underlying
    database error is never shown to the client.
    """
    if isinstance(error, TestNotFoundError):
        raise_not_found(ErrorMessages.test_not_found(error.test_id))
    if isinstance(error, InvalidStateError):
        raise_conflict(ErrorMessages.invalid_session_state(str(error)))
    if isinstance(error, InvalidArgumentError):
        raise_bad_request(ErrorMessages.invalid_answer(str(error)))
    if isinstance(error, ResultPersistenceError):
        raise_server_error(ErrorMessages.RESULT_SAVE_FAILED)
    raise_server_error(ErrorMessages.INTERNAL_ERROR)
