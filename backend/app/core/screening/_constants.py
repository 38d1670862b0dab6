"""
Default thresholds and cutoffs for screening assessment scoring.

These values are the engine's defaults only. Every scoring entry point takes
them as explicit configuration (see ScoringProfile) so individual test
families can override them without re-implementing the scoring rules.

The values were collected from the per-test scoring rules of the legacy
screening pages, which drifted between near-identical modules. They have no
clinical validation and should be revisited with product input.
"""

from typing import Dict

from libs.domain_types import DifficultyLevel


# =============================================================================
# RESPONSE TIME THRESHOLDS
# =============================================================================
# Maximum expected response time (seconds) per authored difficulty.
# A response is "within threshold" when time_spent <= threshold.

DEFAULT_TIME_THRESHOLDS: Dict[DifficultyLevel, float] = {
    DifficultyLevel.EASY: 15.0,
    DifficultyLevel.MEDIUM: 25.0,
    DifficultyLevel.HARD: 40.0,
}


# =============================================================================
# GRADING PASS RATIOS
# =============================================================================
# Share of max credit needed for a partially-scored item to count as correct.

ORDERED_SEQUENCE_PASS_RATIO = 0.7
FREE_RECALL_PASS_RATIO = 0.6

# Credit for a submitted item that exists in the expected sequence but at
# the wrong position.
DISPLACED_ITEM_CREDIT = 0.5


# =============================================================================
# RISK FACTOR RULE THRESHOLDS (percent, strict "<" comparisons)
# =============================================================================

ACCURACY_FACTOR_THRESHOLD = 60.0
TIME_SCORE_FACTOR_THRESHOLD = 60.0


# =============================================================================
# RISK LEVEL CUTOFFS
# =============================================================================
# High:     factors >= HIGH_FACTOR_COUNT or partial accuracy < HIGH_PARTIAL_ACCURACY
# Moderate: factors >= MODERATE_FACTOR_COUNT or partial accuracy < MODERATE_PARTIAL_ACCURACY
#           or time score < MODERATE_TIME_SCORE

HIGH_FACTOR_COUNT = 3
HIGH_PARTIAL_ACCURACY = 40.0
MODERATE_FACTOR_COUNT = 2
MODERATE_PARTIAL_ACCURACY = 60.0
MODERATE_TIME_SCORE = 60.0


# =============================================================================
# RISK FACTOR MESSAGES
# =============================================================================

ACCURACY_FACTOR_MESSAGE = "significant difficulty with task accuracy"
TIME_FACTOR_MESSAGE = "slower than expected processing speed"
EASY_ITEM_FACTOR_MESSAGE = "difficulty with basic/easy items"
SEQUENCE_ORDER_FACTOR_MESSAGE = "difficulty maintaining sequence order"
