"""
Dyslexia screening engine.

Scores short screening tests and classifies the result into a Low, Moderate
or High risk level:
- Response grading with partial credit for multi-item answers
- Per-question response timing
- Pluggable risk-factor rules and level cutoffs (ScoringProfile)
- A session state machine driving presentation, response and grading
- The catalog of screening tests and their family-specific profiles

The engine is a self-contained library. It never reads application
settings, the clock (other than through an injected Clock) or storage.

Usage Example
-------------
Run a test end to end:

    from app.core.screening import AssessmentSession, ScoringProfile, build_catalog

    catalog = build_catalog(ScoringProfile())
    test = catalog["phonological"]
    session = AssessmentSession(test.questions, test.profile)

    while not session.is_finished:
        session.begin_response()
        session.submit(0)
        session.advance()

    assessment = session.assessment
    print(assessment.risk_level, assessment.risk_factors)

Score results collected elsewhere:

    from app.core.screening import classify_risk

    assessment = classify_risk(results, test.profile)
"""

# =============================================================================
# Public API exports
# =============================================================================

# Value types
from ._types import (
    Grade,
    Question,
    QuestionResult,
    QuestionSet,
    ResultSummary,
    RiskAssessment,
)

# Errors
from .errors import (
    InvalidArgumentError,
    InvalidStateError,
    ResultPersistenceError,
    ScreeningError,
    TestNotFoundError,
)

# Grading and timing
from .grading import grade_response, normalize_answer
from .timing import Clock, TimingRecorder

# Rules and profiles
from .rules import (
    RiskRule,
    average_time_above,
    default_rules,
    difficulty_accuracy_below,
    easy_item_error,
    kind_accuracy_below,
    partial_accuracy_below,
    sequence_order_rule,
    time_score_below,
)
from .profile import RiskCutoffs, ScoringProfile

# Classification
from .classifier import classify_risk, determine_risk_level, summarize_results
from .interpretation import RiskInterpretation, interpret_risk_level

# Sessions
from .scheduling import ScheduledCall, Scheduler, ThreadingScheduler
from .session import TERMINAL_PHASES, AssessmentSession

# Catalog
from .catalog import TestDefinition, build_catalog, family_profile, get_test_definition

__all__ = [
    # Value types
    "Grade",
    "Question",
    "QuestionResult",
    "QuestionSet",
    "ResultSummary",
    "RiskAssessment",
    # Errors
    "InvalidArgumentError",
    "InvalidStateError",
    "ResultPersistenceError",
    "ScreeningError",
    "TestNotFoundError",
    # Grading and timing
    "grade_response",
    "normalize_answer",
    "Clock",
    "TimingRecorder",
    # Rules and profiles
    "RiskRule",
    "average_time_above",
    "default_rules",
    "difficulty_accuracy_below",
    "easy_item_error",
    "kind_accuracy_below",
    "partial_accuracy_below",
    "sequence_order_rule",
    "time_score_below",
    "RiskCutoffs",
    "ScoringProfile",
    # Classification
    "classify_risk",
    "determine_risk_level",
    "summarize_results",
    "RiskInterpretation",
    "interpret_risk_level",
    # Sessions
    "ScheduledCall",
    "Scheduler",
    "ThreadingScheduler",
    "TERMINAL_PHASES",
    "AssessmentSession",
    # Catalog
    "TestDefinition",
    "build_catalog",
    "family_profile",
    "get_test_definition",
]
