"""
Tests for risk level interpretations.
"""
import pytest

from libs.domain_types import RiskLevel

from app.core.screening import interpret_risk_level
from app.core.screening.interpretation import SCREENING_DISCLAIMER


@pytest.mark.parametrize(
    "level,title",
    [
        (RiskLevel.HIGH, "High Indication of Dyslexia"),
        (RiskLevel.MODERATE, "Moderate Signs of Reading Difficulties"),
        (RiskLevel.LOW, "Low Indication of Dyslexia"),
    ],
)
def test_titles(level, title):
    """Test the title for each risk level."""
    assert interpret_risk_level(level).title == title


def test_every_level_carries_disclaimer():
    """Test that every interpretation reminds the user this is not a diagnosis."""
    for level in RiskLevel:
        interpretation = interpret_risk_level(level)
        assert interpretation.disclaimer == SCREENING_DISCLAIMER
        assert interpretation.message


def test_accepts_level_value():
    """Test that the stored string value can be interpreted directly."""
    assert interpret_risk_level("High") == interpret_risk_level(RiskLevel.HIGH)
