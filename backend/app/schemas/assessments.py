"""
Pydantic schemas for screening assessment endpoints.

The stored assessment record (AssessmentRecord and QuestionResultRecord) is
serialized with camelCase field names (accuracyPercent, riskLevel, ...),
identical for every test family. Request and session schemas use the API's
usual snake_case names.
"""
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from libs.domain_types import (
    AgeBand,
    DifficultyLevel,
    QuestionKind,
    RiskLevel,
    SessionPhase,
    TestFamily,
)


class CamelModel(BaseModel):
    """Base for schemas serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Stored record
# =============================================================================


class QuestionResultRecord(CamelModel):
    """One graded question inside a stored assessment record."""

    question_index: int = Field(..., ge=0)
    kind: QuestionKind
    is_correct: bool
    partial_score: float = Field(..., ge=0)
    max_score: float = Field(..., ge=0)
    time_spent_seconds: float = Field(..., ge=0)
    difficulty: DifficultyLevel


class AssessmentRecord(CamelModel):
    """A completed screening assessment, as persisted and returned to clients."""

    accuracy_percent: float = Field(..., ge=0, le=100)
    partial_accuracy_percent: float = Field(..., ge=0, le=100)
    average_time_seconds: float = Field(..., ge=0)
    time_score_percent: float = Field(..., ge=0, le=100)
    risk_factors: List[str]
    risk_level: RiskLevel
    correct_answers: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1)
    results: List[QuestionResultRecord]
    test_id: Optional[str] = None
    test_title: Optional[str] = None
    family: Optional[TestFamily] = None
    age_band: Optional[AgeBand] = None
    completed_at: Optional[datetime] = None


class RiskInterpretationResponse(BaseModel):
    """Headline and guidance shown alongside a risk level."""

    title: str
    message: str
    disclaimer: str


class AssessmentResultResponse(BaseModel):
    """A stored record together with its interpretation."""

    record: AssessmentRecord = Field(..., description="The assessment record")
    interpretation: RiskInterpretationResponse = Field(
        ..., description="User-facing interpretation of the risk level"
    )


class AssessmentHistoryResponse(BaseModel):
    """Stored records, newest first."""

    results: List[AssessmentRecord] = Field(..., description="Records, newest first")
    total_count: int = Field(..., description="Number of records returned")


# =============================================================================
# Catalog
# =============================================================================


class QuestionView(BaseModel):
    """A question as shown to the user. Never includes the expected answer."""

    index: int = Field(..., description="Zero-based question position")
    kind: QuestionKind
    prompt: str
    difficulty: DifficultyLevel
    options: List[str] = Field(default_factory=list)
    stimulus: List[str] = Field(
        default_factory=list,
        description="Items shown during the presentation phase only",
    )
    presentation_duration_seconds: Optional[float] = None
    hint: Optional[str] = None


class TestSummary(BaseModel):
    """Catalog entry for a screening test."""

    test_id: str
    title: str
    family: TestFamily
    age_band: AgeBand
    description: str
    total_questions: int
    is_timed: bool = Field(
        ..., description="Whether any question has a timed presentation phase"
    )


class TestDetailResponse(TestSummary):
    """A screening test with its questions."""

    questions: List[QuestionView]


class TestCatalogResponse(BaseModel):
    tests: List[TestSummary]


# =============================================================================
# Sessions
# =============================================================================


class StartSessionRequest(BaseModel):
    """Schema for starting a screening session."""

    test_id: str = Field(..., min_length=1, max_length=50, description="Catalog test id")


class SessionStateResponse(BaseModel):
    """Current state of a screening session."""

    session_id: str
    test_id: str
    phase: SessionPhase
    current_index: int
    total_questions: int
    answered_count: int
    current_question: Optional[QuestionView] = Field(
        None, description="Question in play (absent once the session is finished)"
    )
    presentation_seconds_remaining: Optional[float] = Field(
        None, description="Countdown left before a timed question opens for answers"
    )


class SubmitAnswerRequest(BaseModel):
    """Schema for submitting an answer to the current question.

    The answer shape depends on the question kind: an option index for
    single_choice, a list of items (or a comma-separated string) for
    ordered_sequence and free_recall, a word for spelling_blank. A missing
    answer grades to zero credit.
    """

    answer: Optional[Union[int, str, List[Union[int, str]]]] = Field(
        None, description="Answer to the current question"
    )


class SubmitAnswerResponse(BaseModel):
    """Graded answer plus the session state after advancing."""

    result: QuestionResultRecord
    session: SessionStateResponse
    assessment: Optional[AssessmentResultResponse] = Field(
        None, description="Final assessment once the last question is graded"
    )


class AbandonSessionResponse(BaseModel):
    """Schema for abandoning a screening session."""

    session: SessionStateResponse
    message: str
