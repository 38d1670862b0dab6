"""
Tests for the assessment service layer.
"""
from datetime import datetime, timezone

import pytest

from libs.domain_types import DifficultyLevel, RiskLevel, SessionPhase

from app.core.config import Settings
from app.core.screening import ScoringProfile, build_catalog, classify_risk
from app.services.assessments import (
    SessionRegistry,
    build_assessment_record,
    describe_test,
    profile_from_settings,
    result_response,
    session_state,
)


@pytest.fixture
def catalog():
    return build_catalog(ScoringProfile())


@pytest.fixture
def registry(manual_scheduler, fake_clock):
    return SessionRegistry(scheduler_factory=lambda: manual_scheduler, clock=fake_clock)


class TestProfileFromSettings:
    """Tests for turning settings into the baseline scoring profile."""

    def test_defaults_match_engine_defaults(self):
        """Test that default settings reproduce the engine's default profile."""
        profile = profile_from_settings(Settings())
        default = ScoringProfile()

        assert dict(profile.time_thresholds) == dict(default.time_thresholds)
        assert profile.cutoffs == default.cutoffs
        assert profile.ordered_pass_ratio == default.ordered_pass_ratio
        assert profile.recall_pass_ratio == default.recall_pass_ratio
        assert [r.name for r in profile.rules] == [r.name for r in default.rules]

    def test_overrides_flow_into_profile(self):
        """Test that configured values reach the profile."""
        config = Settings(
            SCREENING_TIME_THRESHOLDS={"easy": 10, "medium": 20, "hard": 30},
            RISK_HIGH_FACTOR_COUNT=4,
            ORDERED_SEQUENCE_PASS_RATIO=0.9,
        )

        profile = profile_from_settings(config)

        assert profile.threshold_for(DifficultyLevel.EASY) == 10.0
        assert profile.cutoffs.high_factor_count == 4
        assert profile.ordered_pass_ratio == 0.9

    def test_accuracy_factor_threshold_is_configurable(self, make_result):
        """Test that the accuracy rule uses the configured threshold."""
        profile = profile_from_settings(Settings(RISK_ACCURACY_FACTOR_THRESHOLD=30.0))
        results = [make_result(0, True, DifficultyLevel.HARD, 1.0)] + [
            make_result(i, False, DifficultyLevel.HARD, 1.0) for i in range(1, 3)
        ]

        assessment = classify_risk(results, profile)

        assert assessment.partial_accuracy_percent == pytest.approx(100.0 / 3)
        assert assessment.risk_factors == ()


class TestSessionRegistry:
    """Tests for the in-memory session registry."""

    def test_start_registers_session(self, registry, catalog):
        """Test that started sessions can be looked up by id."""
        entry = registry.start(catalog["spelling"])

        assert entry.session_id in registry
        assert registry.get(entry.session_id) is entry
        assert len(registry) == 1
        assert entry.started_at.tzinfo is not None

    def test_sessions_use_test_profile(self, registry, catalog):
        """Test that the session is scored with its test's profile."""
        entry = registry.start(catalog["memory"])

        assert entry.session.profile is catalog["memory"].profile

    def test_discard(self, registry, catalog):
        """Test that discarded sessions are forgotten and unknown ids are ignored."""
        entry = registry.start(catalog["reading"])

        registry.discard(entry.session_id)
        registry.discard("never-existed")

        assert registry.get(entry.session_id) is None
        assert len(registry) == 0

    def test_timed_session_uses_injected_scheduler(
        self, registry, catalog, manual_scheduler
    ):
        """Test that the scheduler factory supplies each session's scheduler."""
        registry.start(catalog["memory"])

        assert len(manual_scheduler.pending) == 1


class TestSessionExpiry:
    """Tests for dropping idle sessions from the registry."""

    @pytest.fixture
    def expiring_registry(self, manual_scheduler, fake_clock):
        return SessionRegistry(
            scheduler_factory=lambda: manual_scheduler,
            clock=fake_clock,
            ttl_seconds=60,
        )

    def test_idle_session_is_abandoned_and_dropped(
        self, expiring_registry, catalog, manual_scheduler, fake_clock
    ):
        """Test that an idle timed session is abandoned and its countdown cancelled."""
        stale = expiring_registry.start(catalog["memory"])
        assert len(manual_scheduler.pending) == 1

        fake_clock.advance(61)
        fresh = expiring_registry.start(catalog["spelling"])

        assert stale.session_id not in expiring_registry
        assert fresh.session_id in expiring_registry
        assert stale.session.phase == SessionPhase.ABANDONED
        assert manual_scheduler.pending == []

    def test_lookup_expires_idle_session(self, expiring_registry, catalog, fake_clock):
        """Test that get() does not return an expired session."""
        entry = expiring_registry.start(catalog["reading"])

        fake_clock.advance(61)

        assert expiring_registry.get(entry.session_id) is None
        assert len(expiring_registry) == 0

    def test_lookup_keeps_session_alive(self, expiring_registry, catalog, fake_clock):
        """Test that each lookup resets the idle timer."""
        entry = expiring_registry.start(catalog["reading"])

        fake_clock.advance(40)
        assert expiring_registry.get(entry.session_id) is entry
        fake_clock.advance(40)

        assert expiring_registry.get(entry.session_id) is entry

    def test_abandoned_walkaways_do_not_accumulate(
        self, expiring_registry, catalog, fake_clock
    ):
        """Test that sessions nobody finishes stay bounded by the TTL."""
        for _ in range(500):
            expiring_registry.start(catalog["spelling"])
            fake_clock.advance(1)

        assert len(expiring_registry) <= 61

    def test_no_ttl_never_expires(self, registry, catalog, fake_clock):
        """Test that expiry is disabled without a TTL."""
        entry = registry.start(catalog["reading"])

        fake_clock.advance(10_000)

        assert registry.expire_idle() == 0
        assert registry.get(entry.session_id) is entry


class TestSchemaConversion:
    """Tests for engine-to-schema conversion."""

    def test_session_state_shows_stimulus_only_while_presenting(
        self, registry, catalog, manual_scheduler
    ):
        """Test that the stimulus is hidden once the response phase opens."""
        entry = registry.start(catalog["memory"])

        presenting = session_state(entry)
        manual_scheduler.advance(5)
        responding = session_state(entry)

        assert presenting.current_question.stimulus == ["3", "7", "2", "9", "4"]
        assert presenting.presentation_seconds_remaining == pytest.approx(5.0)
        assert responding.phase == SessionPhase.RESPONDING
        assert responding.current_question.stimulus == []

    def test_describe_test_has_no_expected_answers(self, catalog):
        """Test that question views never carry the expected answer."""
        detail = describe_test(catalog["sequencing"])

        for question in detail.questions:
            assert "expected" not in question.model_dump()

    def test_build_record(self, catalog, make_result):
        """Test the stored record built from an assessment."""
        test = catalog["reading"]
        assessment = classify_risk([make_result(0, True, DifficultyLevel.EASY, 5.0)])
        completed_at = datetime(2024, 5, 1, 9, 30)

        record = build_assessment_record(test, assessment, completed_at)

        assert record.test_id == "reading"
        assert record.test_title == test.title
        assert record.family == test.family
        assert record.risk_level == RiskLevel.LOW
        assert record.completed_at == completed_at.replace(tzinfo=timezone.utc)
        assert record.results[0].time_spent_seconds == 5.0

    def test_record_defaults_to_now(self, catalog, make_result):
        """Test that the completion time defaults to the current UTC time."""
        assessment = classify_risk([make_result()])

        record = build_assessment_record(catalog["spelling"], assessment)

        assert record.completed_at.tzinfo is not None

    def test_result_response_attaches_interpretation(self, catalog, make_result):
        """Test that responses carry the interpretation for the record's level."""
        results = [make_result(i, False, DifficultyLevel.EASY, 30.0) for i in range(3)]
        record = build_assessment_record(catalog["spelling"], classify_risk(results))

        response = result_response(record)

        assert response.record is record
        assert response.interpretation.title == "High Indication of Dyslexia"
