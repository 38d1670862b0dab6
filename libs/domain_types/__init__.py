"""Shared domain types for the screening services.

This package is the single source of truth for domain enums used across
the backend scoring engine, its API schemas and the persisted result records.

Usage:
    from libs.domain_types import QuestionKind, DifficultyLevel, RiskLevel
"""

import enum


class QuestionKind(str, enum.Enum):
    """Kinds of screening test items."""

    SINGLE_CHOICE = "single_choice"
    ORDERED_SEQUENCE = "ordered_sequence"
    FREE_RECALL = "free_recall"
    SPELLING_BLANK = "spelling_blank"


class DifficultyLevel(str, enum.Enum):
    """Difficulty levels for questions."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class RiskLevel(str, enum.Enum):
    """Coarse screening risk level. Ordered Low < Moderate < High."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]


_RISK_RANK = {RiskLevel.LOW: 0, RiskLevel.MODERATE: 1, RiskLevel.HIGH: 2}


class SessionPhase(str, enum.Enum):
    """Assessment session phase."""

    PRESENTING = "presenting"
    RESPONDING = "responding"
    GRADED = "graded"
    COMPLETE = "complete"
    ABANDONED = "abandoned"


class TestFamily(str, enum.Enum):
    """Screening test families."""

    READING = "reading"
    PHONOLOGICAL = "phonological"
    MEMORY = "memory"
    SEQUENCING = "sequencing"
    SPELLING = "spelling"


class AgeBand(str, enum.Enum):
    """Age band a test definition is written for."""

    GENERAL = "general"
    AGES_6_9 = "ages_6_9"
    AGES_9_12 = "ages_9_12"


__all__ = [
    "QuestionKind",
    "DifficultyLevel",
    "RiskLevel",
    "SessionPhase",
    "TestFamily",
    "AgeBand",
]
