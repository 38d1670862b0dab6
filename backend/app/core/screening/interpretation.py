"""User-facing interpretation of a risk level."""

from dataclasses import dataclass

from libs.domain_types import RiskLevel

SCREENING_DISCLAIMER = (
    "This is a screening tool, not a diagnosis. Only a qualified professional "
    "can diagnose dyslexia through a comprehensive evaluation."
)


@dataclass(frozen=True)
class RiskInterpretation:
    title: str
    message: str
    disclaimer: str = SCREENING_DISCLAIMER


_INTERPRETATIONS = {
    RiskLevel.HIGH: RiskInterpretation(
        title="High Indication of Dyslexia",
        message=(
            "Your test results show several patterns commonly associated with "
            "dyslexia. We strongly recommend consulting with a learning "
            "specialist or educational psychologist for a comprehensive "
            "evaluation."
        ),
    ),
    RiskLevel.MODERATE: RiskInterpretation(
        title="Moderate Signs of Reading Difficulties",
        message=(
            "Your results suggest some challenges that may be related to "
            "dyslexia. Consider discussing these findings with an educational "
            "professional who can provide more detailed assessment."
        ),
    ),
    RiskLevel.LOW: RiskInterpretation(
        title="Low Indication of Dyslexia",
        message=(
            "Your test performance shows good reading comprehension and "
            "processing speed. However, if you continue to experience reading "
            "difficulties, professional evaluation may still be beneficial."
        ),
    ),
}


def interpret_risk_level(level: RiskLevel) -> RiskInterpretation:
    """Title, guidance message and disclaimer for a risk level."""
    return _INTERPRETATIONS[RiskLevel(level)]
