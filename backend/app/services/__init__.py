"""
Services package for business logic.
"""

from .assessments import (
    RegisteredSession,
    SessionRegistry,
    build_assessment_record,
    profile_from_settings,
    result_response,
    session_state,
)

__all__ = [
    "RegisteredSession",
    "SessionRegistry",
    "build_assessment_record",
    "profile_from_settings",
    "result_response",
    "session_state",
]
