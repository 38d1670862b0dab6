"""
Value types shared by the screening engine.

All types here are frozen dataclasses: questions are authored once per test
definition, results are created once by the session right after grading,
and assessments are derived once at completion. None of them are mutated
after construction.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from libs.domain_types import DifficultyLevel, QuestionKind, RiskLevel


@dataclass(frozen=True)
class Question:
    """
    One screening test item.

    Attributes:
        kind: How the submission is graded.
        prompt: Instruction or question text shown to the user.
        expected: Correct answer. Shape depends on kind:
            - SINGLE_CHOICE: option index (int)
            - ORDERED_SEQUENCE: items in the correct order (tuple of str)
            - FREE_RECALL: acceptable items in any order (frozenset of str)
            - SPELLING_BLANK: the target word (str)
        difficulty: Authored difficulty, drives the time threshold.
        options: Choices offered to the user (choice list, items to arrange,
            or items to pick from).
        stimulus: Items shown during the presentation phase only.
        presentation_duration_seconds: How long the stimulus is shown before
            the response phase opens. None for untimed questions.
        hint: Optional supporting text (e.g. a definition or a sentence with
            a blank for spelling items).
    """

    kind: QuestionKind
    prompt: str
    expected: Any
    difficulty: DifficultyLevel
    options: Tuple[str, ...] = ()
    stimulus: Tuple[str, ...] = ()
    presentation_duration_seconds: Optional[float] = None
    hint: Optional[str] = None

    def __post_init__(self) -> None:
        # Normalise container shapes so authored lists/sets stay immutable
        if self.kind == QuestionKind.ORDERED_SEQUENCE and not isinstance(
            self.expected, tuple
        ):
            object.__setattr__(self, "expected", tuple(self.expected))
        elif self.kind == QuestionKind.FREE_RECALL and not isinstance(
            self.expected, frozenset
        ):
            object.__setattr__(self, "expected", frozenset(self.expected))
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))
        if not isinstance(self.stimulus, tuple):
            object.__setattr__(self, "stimulus", tuple(self.stimulus))

    @property
    def is_timed(self) -> bool:
        """Whether the presentation phase ends on a countdown."""
        return (
            self.presentation_duration_seconds is not None
            and self.presentation_duration_seconds > 0
        )


@dataclass(frozen=True)
class Grade:
    """Verdict produced by the response grader for one submission."""

    is_correct: bool
    partial_score: float
    max_score: float


@dataclass(frozen=True)
class QuestionResult:
    """One evaluated attempt at a question."""

    question_index: int
    kind: QuestionKind
    is_correct: bool
    partial_score: float
    max_score: float
    time_spent_seconds: float
    difficulty: DifficultyLevel

    @property
    def credit_ratio(self) -> float:
        """Partial credit as a fraction of max credit (0.0 - 1.0)."""
        if self.max_score <= 0:
            return 0.0
        return self.partial_score / self.max_score


@dataclass(frozen=True)
class ResultSummary:
    """
    Summary statistics over a completed result list.

    This is the input handed to every risk rule predicate, so rules can
    combine the aggregate percentages with per-result detail.
    """

    results: Tuple[QuestionResult, ...]
    correct_answers: int
    total_questions: int
    accuracy_percent: float
    partial_accuracy_percent: float
    average_time_seconds: float
    time_score_percent: float


@dataclass(frozen=True)
class RiskAssessment:
    """Aggregate produced when a test run completes."""

    accuracy_percent: float
    partial_accuracy_percent: float
    average_time_seconds: float
    time_score_percent: float
    risk_factors: Tuple[str, ...]
    risk_level: RiskLevel
    correct_answers: int
    total_questions: int
    results: Tuple[QuestionResult, ...] = field(default_factory=tuple)


QuestionSet = Tuple[Question, ...]
