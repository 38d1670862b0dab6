"""
Tests for the screening test catalog and family profiles.
"""
import pytest

from libs.domain_types import AgeBand, DifficultyLevel, QuestionKind, TestFamily

from app.core.screening import (
    ScoringProfile,
    TestNotFoundError,
    build_catalog,
    classify_risk,
    family_profile,
    get_test_definition,
)

EXPECTED_IDS = [
    "reading",
    "reading-6-9",
    "reading-9-12",
    "phonological",
    "phonological-6-9",
    "memory",
    "memory-6-9",
    "sequencing",
    "spelling",
]


@pytest.fixture
def catalog():
    return build_catalog(ScoringProfile())


def _thresholds(profile):
    return {d.value: profile.threshold_for(d) for d in DifficultyLevel}


class TestBuildCatalog:
    """Tests for build_catalog."""

    def test_contains_every_test_in_order(self, catalog):
        """Test the catalog ids and their order."""
        assert list(catalog) == EXPECTED_IDS

    def test_every_test_has_questions(self, catalog):
        """Test that no definition is empty."""
        for test in catalog.values():
            assert test.total_questions > 0
            assert test.test_id in EXPECTED_IDS

    def test_families_and_bands(self, catalog):
        """Test family and age band assignments."""
        assert catalog["reading-6-9"].family == TestFamily.READING
        assert catalog["reading-6-9"].age_band == AgeBand.AGES_6_9
        assert catalog["reading-9-12"].age_band == AgeBand.AGES_9_12
        assert catalog["memory"].age_band == AgeBand.GENERAL
        assert catalog["spelling"].family == TestFamily.SPELLING

    def test_only_memory_tests_are_timed(self, catalog):
        """Test which tests use timed presentation."""
        timed = {test_id for test_id, test in catalog.items() if test.is_timed}

        assert timed == {"memory", "memory-6-9"}

    def test_memory_presentation_durations(self, catalog):
        """Test the presentation durations of the memory items."""
        durations = [
            q.presentation_duration_seconds for q in catalog["memory"].questions
        ]

        assert durations == [5, 6, 6, 8]
        assert all(
            q.presentation_duration_seconds == 3
            for q in catalog["memory-6-9"].questions
        )

    def test_reverse_recall_expects_reversed_stimulus(self, catalog):
        """Test that the reverse-order item expects the stimulus reversed."""
        reverse = catalog["memory"].questions[2]

        assert reverse.kind == QuestionKind.ORDERED_SEQUENCE
        assert tuple(reversed(reverse.stimulus)) == tuple(reverse.expected)

    def test_spelling_items_carry_hints(self, catalog):
        """Test that every spelling item has a definition hint."""
        for question in catalog["spelling"].questions:
            assert question.kind == QuestionKind.SPELLING_BLANK
            assert question.hint

    def test_single_choice_answers_are_valid_indices(self, catalog):
        """Test that every single choice answer points at an option."""
        for test in catalog.values():
            for question in test.questions:
                if question.kind == QuestionKind.SINGLE_CHOICE:
                    assert 0 <= question.expected < len(question.options)


class TestFamilyProfiles:
    """Tests for per-family threshold and rule overrides."""

    @pytest.mark.parametrize(
        "test_id,expected",
        [
            ("reading", {"easy": 15, "medium": 25, "hard": 40}),
            ("phonological", {"easy": 12, "medium": 20, "hard": 30}),
            ("spelling", {"easy": 15, "medium": 25, "hard": 35}),
            ("memory", {"easy": 20, "medium": 35, "hard": 50}),
            ("sequencing", {"easy": 25, "medium": 40, "hard": 60}),
            ("reading-6-9", {"easy": 25, "medium": 40, "hard": 60}),
            ("reading-9-12", {"easy": 25, "medium": 40, "hard": 60}),
            ("phonological-6-9", {"easy": 25, "medium": 40, "hard": 60}),
            ("memory-6-9", {"easy": 25, "medium": 40, "hard": 60}),
        ],
    )
    def test_time_thresholds(self, catalog, test_id, expected):
        """Test each test's effective time thresholds."""
        assert _thresholds(catalog[test_id].profile) == expected

    def test_default_rules_come_first(self, catalog):
        """Test that family rules are appended after the shared rules."""
        default_names = [rule.name for rule in ScoringProfile().rules]

        for test in catalog.values():
            names = [rule.name for rule in test.profile.rules]
            assert names[: len(default_names)] == default_names

    @pytest.mark.parametrize(
        "test_id,extra_count",
        [
            ("reading", 1),
            ("reading-6-9", 1),
            ("phonological", 0),
            ("spelling", 0),
            ("memory", 1),
            ("memory-6-9", 1),
            ("sequencing", 2),
        ],
    )
    def test_extra_rule_counts(self, catalog, test_id, extra_count):
        """Test how many family rules each test adds."""
        default_count = len(ScoringProfile().rules)

        assert len(catalog[test_id].profile.rules) == default_count + extra_count

    def test_baseline_settings_are_kept(self):
        """Test that a family profile keeps the baseline pass ratios."""
        baseline = ScoringProfile(ordered_pass_ratio=0.8, recall_pass_ratio=0.5)

        profile = family_profile(TestFamily.MEMORY, AgeBand.GENERAL, baseline)

        assert profile.ordered_pass_ratio == 0.8
        assert profile.recall_pass_ratio == 0.5
        assert baseline.threshold_for(DifficultyLevel.EASY) == 15.0

    def test_configured_baseline_thresholds_are_inherited(self):
        """Test that families without their own values use the baseline thresholds."""
        baseline = ScoringProfile().with_thresholds(easy=100, medium=200, hard=300)

        catalog = build_catalog(baseline)

        assert _thresholds(catalog["reading"].profile) == {
            "easy": 100, "medium": 200, "hard": 300,
        }
        assert _thresholds(catalog["spelling"].profile) == {
            "easy": 100, "medium": 200, "hard": 35,
        }
        assert _thresholds(catalog["phonological"].profile)["easy"] == 12

    def test_reading_average_time_rule(self, catalog, make_result):
        """Test the reading family's extended processing time factor."""
        results = [make_result(i, True, DifficultyLevel.HARD, 35.0) for i in range(4)]

        assessment = classify_risk(results, catalog["reading"].profile)

        assert "extended processing time per question" in assessment.risk_factors

    def test_sequencing_rules(self, catalog, make_result):
        """Test the sequencing family's order and complexity factors."""
        results = [
            make_result(
                i, False, DifficultyLevel.HARD, 5.0, QuestionKind.ORDERED_SEQUENCE, 1.0, 5.0
            )
            for i in range(3)
        ]

        assessment = classify_risk(results, catalog["sequencing"].profile)

        assert assessment.risk_factors[-2:] == (
            "difficulty maintaining sequence order",
            "significant difficulty with complex sequencing",
        )


class TestGetTestDefinition:
    """Tests for catalog lookups."""

    def test_known_id(self, catalog):
        """Test that a known id returns its definition."""
        assert get_test_definition(catalog, "spelling").title == "Spelling"

    def test_unknown_id_raises(self, catalog):
        """Test that an unknown id raises TestNotFoundError."""
        with pytest.raises(TestNotFoundError) as exc_info:
            get_test_definition(catalog, "handwriting")

        assert exc_info.value.test_id == "handwriting"
