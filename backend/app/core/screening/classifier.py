"""
Risk classification for completed screening tests.

Turns a completed list of QuestionResults into a RiskAssessment:

1. accuracy_percent          = correct / total * 100
2. partial_accuracy_percent  = summed partial credit / summed max credit * 100
3. average_time_seconds      = mean time spent per question
4. time_score_percent        = share of results answered within the
                               per-difficulty time threshold (time <= threshold)
5. risk_factors              = messages of the profile's rules that fire,
                               in rule order
6. risk_level                = High, then Moderate, else Low (see
                               determine_risk_level)

The classification is a pure function of the result list and the profile.
It does not read the clock, global settings or any random source, so calling
it twice with the same input yields equal assessments.
"""

import logging
from typing import Optional, Sequence

from libs.domain_types import RiskLevel

from app.core.screening._types import QuestionResult, ResultSummary, RiskAssessment
from app.core.screening.errors import InvalidArgumentError
from app.core.screening.profile import RiskCutoffs, ScoringProfile
from app.core.screening.rules import partial_credit_percent

logger = logging.getLogger(__name__)


def summarize_results(
    results: Sequence[QuestionResult], profile: ScoringProfile
) -> ResultSummary:
    """
    Compute summary statistics over a completed result list.

    Args:
        results: Graded results, one per question.
        profile: Supplies the per-difficulty time thresholds.

    Returns:
        ResultSummary with accuracy, partial accuracy, timing and counts.

    Raises:
        InvalidArgumentError: If results is empty.
    """
    if not results:
        raise InvalidArgumentError("Cannot classify risk from an empty result list")

    total = len(results)
    correct = sum(1 for r in results if r.is_correct)
    within_threshold = sum(
        1
        for r in results
        if r.time_spent_seconds <= profile.threshold_for(r.difficulty)
    )

    return ResultSummary(
        results=tuple(results),
        correct_answers=correct,
        total_questions=total,
        accuracy_percent=100.0 * correct / total,
        partial_accuracy_percent=partial_credit_percent(results),
        average_time_seconds=sum(r.time_spent_seconds for r in results) / total,
        time_score_percent=100.0 * within_threshold / total,
    )


def determine_risk_level(
    factor_count: int,
    partial_accuracy_percent: float,
    time_score_percent: float,
    cutoffs: Optional[RiskCutoffs] = None,
) -> RiskLevel:
    """
    Map factor count and accuracy onto a risk level.

    Evaluated High first, then Moderate, else Low, so every input has exactly
    one outcome.

    Args:
        factor_count: Number of risk factors that fired.
        partial_accuracy_percent: Partial-credit accuracy (0-100).
        time_score_percent: Share of on-time answers (0-100).
        cutoffs: Level cutoffs (defaults to RiskCutoffs()).

    Returns:
        RiskLevel.HIGH, RiskLevel.MODERATE or RiskLevel.LOW
    """
    cutoffs = cutoffs or RiskCutoffs()

    if (
        factor_count >= cutoffs.high_factor_count
        or partial_accuracy_percent < cutoffs.high_partial_accuracy
    ):
        return RiskLevel.HIGH
    if (
        factor_count >= cutoffs.moderate_factor_count
        or partial_accuracy_percent < cutoffs.moderate_partial_accuracy
        or time_score_percent < cutoffs.moderate_time_score
    ):
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def classify_risk(
    results: Sequence[QuestionResult],
    profile: Optional[ScoringProfile] = None,
) -> RiskAssessment:
    """
    Classify screening risk from a completed result list.

    Args:
        results: Graded results in question order.
        profile: Thresholds, rules and cutoffs to apply. Defaults to the
            baseline ScoringProfile().

    Returns:
        RiskAssessment carrying the statistics, fired risk factors and level.

    Raises:
        InvalidArgumentError: If results is empty, or a result's difficulty
            has no configured time threshold.

    Example:
        >>> assessment = classify_risk(session_results)
        >>> assessment.risk_level
        <RiskLevel.LOW: 'Low'>
    """
    profile = profile or ScoringProfile()
    summary = summarize_results(results, profile)

    risk_factors = tuple(
        rule.message for rule in profile.rules if rule.evaluate(summary)
    )
    risk_level = determine_risk_level(
        len(risk_factors),
        summary.partial_accuracy_percent,
        summary.time_score_percent,
        profile.cutoffs,
    )

    logger.debug(
        f"Classified {summary.total_questions} results: "
        f"partial_accuracy={summary.partial_accuracy_percent:.1f}, "
        f"time_score={summary.time_score_percent:.1f}, "
        f"factors={len(risk_factors)}, level={risk_level.value}"
    )

    return RiskAssessment(
        accuracy_percent=summary.accuracy_percent,
        partial_accuracy_percent=summary.partial_accuracy_percent,
        average_time_seconds=summary.average_time_seconds,
        time_score_percent=summary.time_score_percent,
        risk_factors=risk_factors,
        risk_level=risk_level,
        correct_answers=summary.correct_answers,
        total_questions=summary.total_questions,
        results=summary.results,
    )
