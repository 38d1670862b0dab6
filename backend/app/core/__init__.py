"""
Core module for application configuration and utilities.

The screening engine lives in app.core.screening and does not depend on
settings; import it directly: from app.core.screening import ...
"""
from .config import settings

__all__ = ["settings"]
