"""
Assessment session state machine.

One AssessmentSession drives a single run of a screening test:

    PRESENTING -> RESPONDING -> GRADED -> PRESENTING (next question) ...
                                       -> COMPLETE (after the last question)

    any non-terminal phase -> ABANDONED

- PRESENTING: the question (and any stimulus) is shown. Timed questions
  leave this phase when their presentation countdown fires; untimed
  questions leave it on begin_response().
- RESPONDING: the timing recorder runs; exactly one submit() is accepted.
- GRADED: the result is recorded; advance() moves to the next question or
  completes the session.
- COMPLETE: terminal. The risk classifier ran exactly once and the
  assessment is available.
- ABANDONED: terminal. Any pending presentation callback is cancelled, and a
  callback that still fires afterwards is ignored.

A session owns all of its mutable state and is never shared between tests.
Completed sessions cannot be restarted; construct a new session instead.
"""

import logging
import threading
import time
import uuid
from typing import Any, List, Optional, Sequence, Tuple

from libs.domain_types import SessionPhase

from app.core.screening._types import Question, QuestionResult, RiskAssessment
from app.core.screening.classifier import classify_risk
from app.core.screening.errors import InvalidArgumentError, InvalidStateError
from app.core.screening.grading import grade_response
from app.core.screening.profile import ScoringProfile
from app.core.screening.scheduling import ScheduledCall, Scheduler, ThreadingScheduler
from app.core.screening.timing import Clock, TimingRecorder

logger = logging.getLogger(__name__)

TERMINAL_PHASES = frozenset({SessionPhase.COMPLETE, SessionPhase.ABANDONED})


class AssessmentSession:
    """
    Orchestrates one screening test run.

    Args:
        questions: Ordered, non-empty question list.
        profile: Scoring configuration (defaults to ScoringProfile()).
        scheduler: Runs the presentation countdown for timed questions.
        clock: Monotonic clock used for response timing.
        session_id: Identifier (generated when omitted).

    Raises:
        InvalidArgumentError: If questions is empty.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        profile: Optional[ScoringProfile] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None,
        session_id: Optional[str] = None,
    ) -> None:
        if not questions:
            raise InvalidArgumentError("An assessment session needs at least one question")

        self.session_id = session_id or str(uuid.uuid4())
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._profile = profile or ScoringProfile()
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._clock: Clock = clock or time.monotonic
        self._recorder = TimingRecorder(self._clock)
        # Timer callbacks may arrive on another thread
        self._lock = threading.RLock()

        self._index = 0
        self._phase = SessionPhase.PRESENTING
        self._results: List[QuestionResult] = []
        self._assessment: Optional[RiskAssessment] = None
        self._pending_presentation: Optional[ScheduledCall] = None
        self._presentation_generation = 0
        self._presentation_deadline: Optional[float] = None

        self._enter_presenting()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def profile(self) -> ScoringProfile:
        return self._profile

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Optional[Question]:
        """The question in play, or None once the session is terminal."""
        if self._phase in TERMINAL_PHASES:
            return None
        return self._questions[self._index]

    @property
    def results(self) -> Tuple[QuestionResult, ...]:
        return tuple(self._results)

    @property
    def is_finished(self) -> bool:
        return self._phase in TERMINAL_PHASES

    @property
    def presentation_seconds_remaining(self) -> Optional[float]:
        """Seconds left on the current presentation countdown, if one is running."""
        with self._lock:
            if self._phase != SessionPhase.PRESENTING or self._presentation_deadline is None:
                return None
            return max(0.0, self._presentation_deadline - self._clock())

    @property
    def assessment(self) -> RiskAssessment:
        """
        The risk assessment of a completed session.

        Raises:
            InvalidStateError: If the session has not completed.
        """
        if self._phase != SessionPhase.COMPLETE or self._assessment is None:
            raise InvalidStateError(
                f"Assessment is only available once the session is complete "
                f"(phase={self._phase.value})"
            )
        return self._assessment

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin_response(self) -> None:
        """
        Leave the presentation phase of an untimed question.

        Raises:
            InvalidStateError: If not presenting, or the current question is
                timed (its countdown ends the presentation).
        """
        with self._lock:
            self._require_phase(SessionPhase.PRESENTING, "begin responding")
            if self._questions[self._index].is_timed:
                raise InvalidStateError(
                    "Timed questions leave the presentation phase when their "
                    "countdown completes"
                )
            self._enter_responding()

    def submit(self, submission: Any) -> QuestionResult:
        """
        Grade the answer to the current question.

        Args:
            submission: Answer in the shape expected by the question kind.

        Returns:
            The recorded QuestionResult.

        Raises:
            InvalidStateError: If the session is not in the responding phase
                (e.g. a repeated submit).
            InvalidArgumentError: If the question kind cannot be graded.
        """
        with self._lock:
            self._require_phase(SessionPhase.RESPONDING, "submit an answer")
            question = self._questions[self._index]

            grade = grade_response(
                question,
                submission,
                ordered_pass_ratio=self._profile.ordered_pass_ratio,
                recall_pass_ratio=self._profile.recall_pass_ratio,
            )
            elapsed = self._recorder.stop()

            result = QuestionResult(
                question_index=self._index,
                kind=question.kind,
                is_correct=grade.is_correct,
                partial_score=grade.partial_score,
                max_score=grade.max_score,
                time_spent_seconds=elapsed,
                difficulty=question.difficulty,
            )
            self._results.append(result)
            self._phase = SessionPhase.GRADED

            logger.info(
                f"Session {self.session_id} graded question {self._index + 1}/"
                f"{len(self._questions)}: correct={result.is_correct}, "
                f"credit={result.partial_score}/{result.max_score}, "
                f"time={elapsed:.2f}s"
            )
            return result

    def advance(self) -> SessionPhase:
        """
        Move past a graded question.

        Returns:
            The new phase: PRESENTING for the next question, or COMPLETE
            after the last one.

        Raises:
            InvalidStateError: If the current question has not been graded.
        """
        with self._lock:
            self._require_phase(SessionPhase.GRADED, "advance")
            if self._index + 1 < len(self._questions):
                self._index += 1
                self._enter_presenting()
            else:
                self._complete()
            return self._phase

    def abandon(self) -> None:
        """
        Abandon the session, cancelling any pending presentation countdown.

        Raises:
            InvalidStateError: If the session already completed or was abandoned.
        """
        with self._lock:
            if self._phase in TERMINAL_PHASES:
                raise InvalidStateError(
                    f"Cannot abandon a session that is already {self._phase.value}"
                )
            self._cancel_presentation()
            self._phase = SessionPhase.ABANDONED
            logger.info(
                f"Session {self.session_id} abandoned after "
                f"{len(self._results)}/{len(self._questions)} questions"
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_phase(self, expected: SessionPhase, action: str) -> None:
        if self._phase != expected:
            raise InvalidStateError(
                f"Cannot {action} while session is {self._phase.value} "
                f"(expected {expected.value})"
            )

    def _enter_presenting(self) -> None:
        self._phase = SessionPhase.PRESENTING
        self._presentation_deadline = None
        question = self._questions[self._index]
        if not question.is_timed:
            return

        duration = float(question.presentation_duration_seconds or 0)
        self._presentation_generation += 1
        generation = self._presentation_generation
        self._presentation_deadline = self._clock() + duration
        self._pending_presentation = self._scheduler.call_later(
            duration, lambda: self._on_presentation_elapsed(generation)
        )

    def _on_presentation_elapsed(self, generation: int) -> None:
        with self._lock:
            if (
                generation != self._presentation_generation
                or self._phase != SessionPhase.PRESENTING
            ):
                logger.debug(
                    f"Session {self.session_id} ignored stale presentation callback"
                )
                return
            self._pending_presentation = None
            self._enter_responding()

    def _enter_responding(self) -> None:
        self._presentation_deadline = None
        self._phase = SessionPhase.RESPONDING
        self._recorder.start()

    def _cancel_presentation(self) -> None:
        # Bumping the generation also invalidates callbacks already in flight
        self._presentation_generation += 1
        self._presentation_deadline = None
        if self._pending_presentation is not None:
            self._pending_presentation.cancel()
            self._pending_presentation = None

    def _complete(self) -> None:
        self._assessment = classify_risk(self._results, self._profile)
        self._phase = SessionPhase.COMPLETE
        logger.info(
            f"Session {self.session_id} complete: "
            f"risk_level={self._assessment.risk_level.value}, "
            f"factors={len(self._assessment.risk_factors)}"
        )
