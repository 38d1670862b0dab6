"""
Application configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List, Self

from libs.domain_types import DifficultyLevel


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Dyslexia Screening API"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Screening scoring baseline
    # Per-difficulty response time thresholds in seconds. Individual test
    # families override these in app/core/screening/catalog.py.
    # Keys must match DifficultyLevel enum values in libs/domain_types
    SCREENING_TIME_THRESHOLDS: Dict[str, float] = {
        "easy": 15.0,
        "medium": 25.0,
        "hard": 40.0,
    }
    ORDERED_SEQUENCE_PASS_RATIO: float = Field(
        default=0.7,
        gt=0.0,
        le=1.0,
        description="Share of credit needed for an ordered sequence to count as correct",
    )
    FREE_RECALL_PASS_RATIO: float = Field(
        default=0.6,
        gt=0.0,
        le=1.0,
        description="Share of items needed for a free recall answer to count as correct",
    )

    # Risk classification cutoffs (percent values are 0-100)
    RISK_ACCURACY_FACTOR_THRESHOLD: float = Field(default=60.0, ge=0.0, le=100.0)
    RISK_TIME_SCORE_FACTOR_THRESHOLD: float = Field(default=60.0, ge=0.0, le=100.0)
    RISK_HIGH_FACTOR_COUNT: int = Field(default=3, ge=1)
    RISK_HIGH_PARTIAL_ACCURACY: float = Field(default=40.0, ge=0.0, le=100.0)
    RISK_MODERATE_FACTOR_COUNT: int = Field(default=2, ge=1)
    RISK_MODERATE_PARTIAL_ACCURACY: float = Field(default=60.0, ge=0.0, le=100.0)
    RISK_MODERATE_TIME_SCORE: float = Field(default=60.0, ge=0.0, le=100.0)

    # Idle time after which an unfinished session is abandoned and dropped
    SESSION_TTL_SECONDS: float = Field(default=1800.0, gt=0.0)

    # Result storage
    RESULTS_STORAGE_KEY: str = "testResults"
    RESULTS_HISTORY_LIMIT: int = Field(default=50, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_time_thresholds(self) -> Self:
        """Validate SCREENING_TIME_THRESHOLDS: one positive value per difficulty."""
        thresholds = self.SCREENING_TIME_THRESHOLDS
        expected_levels = {level.value for level in DifficultyLevel}
        if set(thresholds.keys()) != expected_levels:
            raise ValueError(
                f"SCREENING_TIME_THRESHOLDS keys must be {sorted(expected_levels)}, "
                f"got {sorted(thresholds.keys())}"
            )
        non_positive = [k for k, v in thresholds.items() if v <= 0]
        if non_positive:
            raise ValueError(
                f"All time thresholds must be positive, got non-positive: {non_positive}"
            )
        return self

    @model_validator(mode="after")
    def validate_risk_cutoffs(self) -> Self:
        """High cutoffs must be at least as strict as the Moderate ones."""
        if self.RISK_HIGH_PARTIAL_ACCURACY > self.RISK_MODERATE_PARTIAL_ACCURACY:
            raise ValueError(
                "RISK_HIGH_PARTIAL_ACCURACY must not exceed "
                f"RISK_MODERATE_PARTIAL_ACCURACY ({self.RISK_HIGH_PARTIAL_ACCURACY} > "
                f"{self.RISK_MODERATE_PARTIAL_ACCURACY})"
            )
        if self.RISK_HIGH_FACTOR_COUNT < self.RISK_MODERATE_FACTOR_COUNT:
            raise ValueError(
                "RISK_HIGH_FACTOR_COUNT must be at least RISK_MODERATE_FACTOR_COUNT "
                f"({self.RISK_HIGH_FACTOR_COUNT} < {self.RISK_MODERATE_FACTOR_COUNT})"
            )
        return self


settings = Settings()
