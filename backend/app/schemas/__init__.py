"""
Pydantic schemas for request/response validation.
"""
from .assessments import (
    AbandonSessionResponse,
    AssessmentHistoryResponse,
    AssessmentRecord,
    AssessmentResultResponse,
    QuestionResultRecord,
    QuestionView,
    RiskInterpretationResponse,
    SessionStateResponse,
    StartSessionRequest,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    TestCatalogResponse,
    TestDetailResponse,
    TestSummary,
)

__all__ = [
    "AbandonSessionResponse",
    "AssessmentHistoryResponse",
    "AssessmentRecord",
    "AssessmentResultResponse",
    "QuestionResultRecord",
    "QuestionView",
    "RiskInterpretationResponse",
    "SessionStateResponse",
    "StartSessionRequest",
    "SubmitAnswerRequest",
    "SubmitAnswerResponse",
    "TestCatalogResponse",
    "TestDetailResponse",
    "TestSummary",
]
