"""
Database models for the screening service.
"""
from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from datetime import datetime, timezone

from .base import Base


class StoredAssessmentResult(Base):
    """
    A completed screening assessment record.

    The record itself is kept as JSON text in the camelCase wire format
    (accuracyPercent, riskLevel, ...) so clients read back exactly what was
    written. storage_key groups records the way the browser client grouped
    them under a single local-storage key; only the newest record per key is
    the "latest result", older rows form the history.
    """

    __tablename__ = "assessment_results"

    id = Column(Integer, primary_key=True, index=True)
    storage_key = Column(String(100), nullable=False, index=True)
    test_id = Column(String(50), nullable=True, index=True)
    payload = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        # Compound index for "latest result for key" queries
        Index("ix_assessment_results_key_created", "storage_key", "created_at"),
    )
