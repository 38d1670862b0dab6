"""Tests for shared domain types package."""

import json

import pytest

from libs.domain_types import (
    AgeBand,
    DifficultyLevel,
    QuestionKind,
    RiskLevel,
    SessionPhase,
    TestFamily,
)


class TestQuestionKind:
    """Tests for QuestionKind enum."""

    def test_values(self):
        assert {k.value for k in QuestionKind} == {
            "single_choice",
            "ordered_sequence",
            "free_recall",
            "spelling_blank",
        }

    def test_str_mixin(self):
        assert QuestionKind("free_recall") == QuestionKind.FREE_RECALL

    def test_json_serializable(self):
        assert json.dumps(QuestionKind.SPELLING_BLANK) == '"spelling_blank"'


class TestDifficultyLevel:
    """Tests for DifficultyLevel enum."""

    def test_values(self):
        assert DifficultyLevel.EASY.value == "easy"
        assert DifficultyLevel.MEDIUM.value == "medium"
        assert DifficultyLevel.HARD.value == "hard"

    def test_count(self):
        assert len(DifficultyLevel) == 3


class TestRiskLevel:
    """Tests for RiskLevel enum."""

    def test_values_match_persisted_labels(self):
        assert [level.value for level in RiskLevel] == ["Low", "Moderate", "High"]

    def test_rank_is_total_order(self):
        assert RiskLevel.LOW.rank < RiskLevel.MODERATE.rank < RiskLevel.HIGH.rank

    @pytest.mark.parametrize("label", ["Low", "Moderate", "High"])
    def test_round_trip_from_label(self, label):
        assert RiskLevel(label).value == label


class TestSessionPhase:
    """Tests for SessionPhase enum."""

    def test_terminal_phases_present(self):
        assert SessionPhase("complete") == SessionPhase.COMPLETE
        assert SessionPhase("abandoned") == SessionPhase.ABANDONED

    def test_count(self):
        assert len(SessionPhase) == 5


class TestFamilyAndAgeBand:
    """Tests for TestFamily and AgeBand enums."""

    def test_families(self):
        assert len(TestFamily) == 5
        assert TestFamily("sequencing") == TestFamily.SEQUENCING

    def test_age_bands(self):
        assert {band.value for band in AgeBand} == {
            "general",
            "ages_6_9",
            "ages_9_12",
        }
