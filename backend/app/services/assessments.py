"""
Assessment service: glue between the screening engine and the API.

- Converts application settings into the engine's baseline ScoringProfile
- Keeps in-progress sessions in an in-memory registry
- Converts engine values into API schemas and stored records
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from libs.domain_types import DifficultyLevel, SessionPhase

from app.core.config import Settings
from app.core.datetime_utils import ensure_timezone_aware, utc_now
from app.core.screening import (
    AssessmentSession,
    Clock,
    Question,
    QuestionResult,
    RiskAssessment,
    RiskCutoffs,
    Scheduler,
    ScoringProfile,
    TestDefinition,
    default_rules,
    interpret_risk_level,
)
from app.schemas.assessments import (
    AssessmentRecord,
    AssessmentResultResponse,
    QuestionResultRecord,
    QuestionView,
    RiskInterpretationResponse,
    SessionStateResponse,
    TestDetailResponse,
    TestSummary,
)

logger = logging.getLogger(__name__)


def profile_from_settings(config: Settings) -> ScoringProfile:
    """
    Build the baseline scoring profile from application settings.

    The screening engine never reads settings itself; this is the only
    place configured thresholds and cutoffs enter it.

    Args:
        config: Loaded application settings

    Returns:
        Baseline ScoringProfile every test family derives from
    """
    return ScoringProfile(
        time_thresholds={
            DifficultyLevel(level): float(seconds)
            for level, seconds in config.SCREENING_TIME_THRESHOLDS.items()
        },
        rules=default_rules(
            accuracy_threshold=config.RISK_ACCURACY_FACTOR_THRESHOLD,
            time_score_threshold=config.RISK_TIME_SCORE_FACTOR_THRESHOLD,
        ),
        cutoffs=RiskCutoffs(
            high_factor_count=config.RISK_HIGH_FACTOR_COUNT,
            high_partial_accuracy=config.RISK_HIGH_PARTIAL_ACCURACY,
            moderate_factor_count=config.RISK_MODERATE_FACTOR_COUNT,
            moderate_partial_accuracy=config.RISK_MODERATE_PARTIAL_ACCURACY,
            moderate_time_score=config.RISK_MODERATE_TIME_SCORE,
        ),
        ordered_pass_ratio=config.ORDERED_SEQUENCE_PASS_RATIO,
        recall_pass_ratio=config.FREE_RECALL_PASS_RATIO,
    )


# =============================================================================
# Session registry
# =============================================================================


@dataclass
class RegisteredSession:
    """A running session and the test it was started for."""

    session: AssessmentSession
    test: TestDefinition
    started_at: datetime = field(default_factory=utc_now)
    # Monotonic time of the last lookup, used for idle expiry
    last_active: float = 0.0

    @property
    def session_id(self) -> str:
        return self.session.session_id


class SessionRegistry:
    """
    In-memory store of running assessment sessions.

    Sessions idle for longer than ``ttl_seconds`` are abandoned and dropped
    the next time a session is started or looked up.

    Args:
        scheduler_factory: Returns the scheduler for each new session
            (defaults to the engine's threading scheduler)
        clock: Monotonic clock handed to each new session and used for expiry
        ttl_seconds: Idle time after which a session expires (None disables expiry)
    """

    def __init__(
        self,
        scheduler_factory: Optional[Callable[[], Scheduler]] = None,
        clock: Optional[Clock] = None,
        ttl_seconds: Optional[float] = None,
    ) -> None:
        self._scheduler_factory = scheduler_factory
        self._clock = clock
        self._ttl_seconds = ttl_seconds
        self._sessions: Dict[str, RegisteredSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def _now(self) -> float:
        return self._clock() if self._clock else time.monotonic()

    def start(self, test: TestDefinition) -> RegisteredSession:
        """Create and register a new session for a test."""
        self.expire_idle()
        scheduler = self._scheduler_factory() if self._scheduler_factory else None
        session = AssessmentSession(
            test.questions,
            test.profile,
            scheduler=scheduler,
            clock=self._clock,
        )
        entry = RegisteredSession(session=session, test=test, last_active=self._now())
        with self._lock:
            self._sessions[entry.session_id] = entry
        logger.info(
            f"Started session {entry.session_id} for test {test.test_id}",
            extra={"session_id": entry.session_id, "test_id": test.test_id},
        )
        return entry

    def get(self, session_id: str) -> Optional[RegisteredSession]:
        self.expire_idle()
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is not None:
                entry.last_active = self._now()
            return entry

    def discard(self, session_id: str) -> None:
        """Forget a session. Unknown ids are ignored."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def expire_idle(self) -> int:
        """
        Abandon and drop sessions idle longer than the configured TTL.

        Abandoning cancels any pending presentation countdown.

        Returns:
            Number of sessions removed
        """
        if self._ttl_seconds is None:
            return 0
        cutoff = self._now() - self._ttl_seconds
        with self._lock:
            expired = [
                entry for entry in self._sessions.values()
                if entry.last_active < cutoff
            ]
            for entry in expired:
                del self._sessions[entry.session_id]

        for entry in expired:
            if not entry.session.is_finished:
                entry.session.abandon()
            logger.info(
                f"Expired idle session {entry.session_id} for test {entry.test.test_id}",
                extra={"session_id": entry.session_id, "test_id": entry.test.test_id},
            )
        return len(expired)


# =============================================================================
# Schema conversion
# =============================================================================


def question_view(
    question: Question, index: int, include_stimulus: bool = True
) -> QuestionView:
    """Public view of a question (never exposes the expected answer)."""
    return QuestionView(
        index=index,
        kind=question.kind,
        prompt=question.prompt,
        difficulty=question.difficulty,
        options=list(question.options),
        stimulus=list(question.stimulus) if include_stimulus else [],
        presentation_duration_seconds=question.presentation_duration_seconds,
        hint=question.hint,
    )


def summarize_test(test: TestDefinition) -> TestSummary:
    return TestSummary(
        test_id=test.test_id,
        title=test.title,
        family=test.family,
        age_band=test.age_band,
        description=test.description,
        total_questions=test.total_questions,
        is_timed=test.is_timed,
    )


def describe_test(test: TestDefinition) -> TestDetailResponse:
    """Catalog entry plus every question.

    Stimulus items are left out: they are only revealed during a session's
    presentation phase.
    """
    return TestDetailResponse(
        **summarize_test(test).model_dump(),
        questions=[
            question_view(q, i, include_stimulus=False)
            for i, q in enumerate(test.questions)
        ],
    )


def session_state(entry: RegisteredSession) -> SessionStateResponse:
    """Snapshot of a session for API responses."""
    session = entry.session
    question = session.current_question
    current = None
    if question is not None:
        # The stimulus disappears once the response phase opens
        include_stimulus = session.phase == SessionPhase.PRESENTING
        current = question_view(question, session.current_index, include_stimulus)

    return SessionStateResponse(
        session_id=entry.session_id,
        test_id=entry.test.test_id,
        phase=session.phase,
        current_index=session.current_index,
        total_questions=session.total_questions,
        answered_count=len(session.results),
        current_question=current,
        presentation_seconds_remaining=session.presentation_seconds_remaining,
    )


def result_record(result: QuestionResult) -> QuestionResultRecord:
    return QuestionResultRecord(
        question_index=result.question_index,
        kind=result.kind,
        is_correct=result.is_correct,
        partial_score=result.partial_score,
        max_score=result.max_score,
        time_spent_seconds=result.time_spent_seconds,
        difficulty=result.difficulty,
    )


def build_assessment_record(
    test: TestDefinition,
    assessment: RiskAssessment,
    completed_at: Optional[datetime] = None,
) -> AssessmentRecord:
    """
    Build the stored record for a completed assessment.

    Args:
        test: The test the assessment was taken on
        assessment: The classifier's output
        completed_at: Completion time (defaults to now, UTC)
    """
    return AssessmentRecord(
        accuracy_percent=assessment.accuracy_percent,
        partial_accuracy_percent=assessment.partial_accuracy_percent,
        average_time_seconds=assessment.average_time_seconds,
        time_score_percent=assessment.time_score_percent,
        risk_factors=list(assessment.risk_factors),
        risk_level=assessment.risk_level,
        correct_answers=assessment.correct_answers,
        total_questions=assessment.total_questions,
        results=[result_record(r) for r in assessment.results],
        test_id=test.test_id,
        test_title=test.title,
        family=test.family,
        age_band=test.age_band,
        completed_at=ensure_timezone_aware(completed_at) if completed_at else utc_now(),
    )


def result_response(record: AssessmentRecord) -> AssessmentResultResponse:
    """Attach the risk level interpretation to a record."""
    interpretation = interpret_risk_level(record.risk_level)
    return AssessmentResultResponse(
        record=record,
        interpretation=RiskInterpretationResponse(
            title=interpretation.title,
            message=interpretation.message,
            disclaimer=interpretation.disclaimer,
        ),
    )


def catalog_summaries(tests: Iterable[TestDefinition]) -> List[TestSummary]:
    return [summarize_test(test) for test in tests]
