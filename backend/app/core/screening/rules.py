"""
Pluggable risk-factor rules.

A rule is a named predicate over a ResultSummary plus the human-readable
risk factor it contributes when the predicate holds. The classifier
evaluates an ordered tuple of rules and appends each firing rule's message
exactly once, in rule order.

The default rule set reproduces the behaviour shared by every test family:

    1. partial accuracy < 60%        -> "significant difficulty with task accuracy"
    2. time score < 60%              -> "slower than expected processing speed"
    3. any easy item answered wrong  -> "difficulty with basic/easy items"

Families append their own rules with the factory functions below instead of
re-implementing the classifier.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Tuple

from libs.domain_types import DifficultyLevel, QuestionKind

from app.core.screening._constants import (
    ACCURACY_FACTOR_MESSAGE,
    ACCURACY_FACTOR_THRESHOLD,
    EASY_ITEM_FACTOR_MESSAGE,
    SEQUENCE_ORDER_FACTOR_MESSAGE,
    TIME_FACTOR_MESSAGE,
    TIME_SCORE_FACTOR_THRESHOLD,
)
from app.core.screening._types import QuestionResult, ResultSummary

RulePredicate = Callable[[ResultSummary], bool]


@dataclass(frozen=True)
class RiskRule:
    """A named predicate that contributes one risk factor when it holds."""

    name: str
    message: str
    predicate: RulePredicate

    def evaluate(self, summary: ResultSummary) -> bool:
        return bool(self.predicate(summary))


def partial_credit_percent(results: Sequence[QuestionResult]) -> float:
    """Summed partial credit over summed max credit, scaled 0-100.

    Returns 0.0 when no credit was available at all.
    """
    max_total = sum(r.max_score for r in results)
    if max_total <= 0:
        return 0.0
    return 100.0 * sum(r.partial_score for r in results) / max_total


def partial_accuracy_below(
    threshold: float = ACCURACY_FACTOR_THRESHOLD,
    message: str = ACCURACY_FACTOR_MESSAGE,
) -> RiskRule:
    """Fires when partial accuracy is strictly below threshold percent."""
    return RiskRule(
        name="partial_accuracy_below",
        message=message,
        predicate=lambda s: s.partial_accuracy_percent < threshold,
    )


def time_score_below(
    threshold: float = TIME_SCORE_FACTOR_THRESHOLD,
    message: str = TIME_FACTOR_MESSAGE,
) -> RiskRule:
    """Fires when the share of on-time answers is strictly below threshold."""
    return RiskRule(
        name="time_score_below",
        message=message,
        predicate=lambda s: s.time_score_percent < threshold,
    )


def easy_item_error(message: str = EASY_ITEM_FACTOR_MESSAGE) -> RiskRule:
    """Fires once if any easy item was answered incorrectly."""
    return RiskRule(
        name="easy_item_error",
        message=message,
        predicate=lambda s: any(
            r.difficulty == DifficultyLevel.EASY and not r.is_correct
            for r in s.results
        ),
    )


def average_time_above(seconds: float, message: str) -> RiskRule:
    """Fires when the mean response time is strictly above seconds."""
    return RiskRule(
        name="average_time_above",
        message=message,
        predicate=lambda s: s.average_time_seconds > seconds,
    )


def kind_accuracy_below(
    kind: QuestionKind,
    threshold: float,
    message: str,
) -> RiskRule:
    """Fires when partial accuracy over items of one kind is below threshold.

    Never fires when the result list has no items of that kind.
    """

    def _predicate(summary: ResultSummary) -> bool:
        selected = [r for r in summary.results if r.kind == kind]
        return bool(selected) and partial_credit_percent(selected) < threshold

    return RiskRule(name=f"{kind.value}_accuracy_below", message=message, predicate=_predicate)


def difficulty_accuracy_below(
    difficulties: Iterable[DifficultyLevel],
    threshold: float,
    message: str,
) -> RiskRule:
    """Fires when partial accuracy over the given difficulties is below threshold.

    Never fires when the result list has no items at those difficulties.
    """
    selected_levels = frozenset(difficulties)

    def _predicate(summary: ResultSummary) -> bool:
        selected = [r for r in summary.results if r.difficulty in selected_levels]
        return bool(selected) and partial_credit_percent(selected) < threshold

    names = "_".join(sorted(level.value for level in selected_levels))
    return RiskRule(name=f"{names}_accuracy_below", message=message, predicate=_predicate)


def sequence_order_rule(
    threshold: float = 50.0, message: str = SEQUENCE_ORDER_FACTOR_MESSAGE
) -> RiskRule:
    """Ordered-sequence accuracy rule used by the sequencing family."""
    return kind_accuracy_below(QuestionKind.ORDERED_SEQUENCE, threshold, message)


def default_rules(
    accuracy_threshold: float = ACCURACY_FACTOR_THRESHOLD,
    time_score_threshold: float = TIME_SCORE_FACTOR_THRESHOLD,
) -> Tuple[RiskRule, ...]:
    """The rule set shared by every test family, in evaluation order."""
    return (
        partial_accuracy_below(accuracy_threshold),
        time_score_below(time_score_threshold),
        easy_item_error(),
    )
