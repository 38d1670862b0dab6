"""
Scoring configuration for a screening test.

A ScoringProfile bundles everything the engine needs to score one test
family: per-difficulty time thresholds, grading pass ratios, the ordered
risk rules and the risk level cutoffs. The engine never reads global
settings; callers build a profile explicitly (see
app.services.assessments.profile_from_settings) and pass it in.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Tuple

from libs.domain_types import DifficultyLevel

from app.core.screening import _constants as c
from app.core.screening.errors import InvalidArgumentError
from app.core.screening.rules import RiskRule, default_rules


@dataclass(frozen=True)
class RiskCutoffs:
    """
    Cutoffs that map risk factors and accuracy onto a risk level.

    High if factors >= high_factor_count or partial accuracy < high_partial_accuracy.
    Moderate if factors >= moderate_factor_count, partial accuracy
    < moderate_partial_accuracy, or time score < moderate_time_score.
    Low otherwise.
    """

    high_factor_count: int = c.HIGH_FACTOR_COUNT
    high_partial_accuracy: float = c.HIGH_PARTIAL_ACCURACY
    moderate_factor_count: int = c.MODERATE_FACTOR_COUNT
    moderate_partial_accuracy: float = c.MODERATE_PARTIAL_ACCURACY
    moderate_time_score: float = c.MODERATE_TIME_SCORE


def _default_thresholds() -> Dict[DifficultyLevel, float]:
    return dict(c.DEFAULT_TIME_THRESHOLDS)


@dataclass(frozen=True)
class ScoringProfile:
    """Complete scoring configuration for one test definition."""

    time_thresholds: Mapping[DifficultyLevel, float] = field(
        default_factory=_default_thresholds
    )
    rules: Tuple[RiskRule, ...] = field(default_factory=default_rules)
    cutoffs: RiskCutoffs = field(default_factory=RiskCutoffs)
    ordered_pass_ratio: float = c.ORDERED_SEQUENCE_PASS_RATIO
    recall_pass_ratio: float = c.FREE_RECALL_PASS_RATIO

    def threshold_for(self, difficulty: DifficultyLevel) -> float:
        """
        Maximum expected response time for a difficulty.

        Raises:
            InvalidArgumentError: If no threshold is configured for it.
        """
        try:
            return self.time_thresholds[difficulty]
        except KeyError:
            raise InvalidArgumentError(
                f"No time threshold configured for difficulty {difficulty!r}"
            ) from None

    def with_thresholds(self, **seconds: float) -> "ScoringProfile":
        """Copy of this profile with some difficulty thresholds replaced.

        Example:
            >>> profile.with_thresholds(easy=12, medium=20, hard=30)
        """
        thresholds = dict(self.time_thresholds)
        for name, value in seconds.items():
            thresholds[DifficultyLevel(name)] = float(value)
        return replace(self, time_thresholds=thresholds)

    def with_extra_rules(self, *rules: RiskRule) -> "ScoringProfile":
        """Copy of this profile with rules appended after the existing ones."""
        return replace(self, rules=tuple(self.rules) + tuple(rules))
