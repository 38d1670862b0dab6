"""
Models package for the screening service.
"""
from .base import Base, AsyncSessionLocal, async_engine, get_db, init_db
from .models import StoredAssessmentResult

__all__ = [
    "Base",
    "AsyncSessionLocal",
    "async_engine",
    "get_db",
    "init_db",
    "StoredAssessmentResult",
]
