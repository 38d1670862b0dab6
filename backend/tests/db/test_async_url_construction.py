"""
Tests for mapping DATABASE_URL onto an async driver.

The mapping is plain string-prefix replacement so hostnames and paths are
passed through untouched.
"""

import pytest

from app.models.base import to_async_url


@pytest.mark.parametrize(
    "url,expected",
    [
        ("sqlite:///./screening.db", "sqlite+aiosqlite:///./screening.db"),
        ("sqlite:////tmp/screening.db", "sqlite+aiosqlite:////tmp/screening.db"),
        ("sqlite+aiosqlite:///./screening.db", "sqlite+aiosqlite:///./screening.db"),
        (
            "postgresql://user:pw@db-1_a.internal:5432/screening",
            "postgresql+asyncpg://user:pw@db-1_a.internal:5432/screening",
        ),
        (
            "postgresql+psycopg2://db.internal/screening",
            "postgresql+asyncpg://db.internal/screening",
        ),
    ],
)
def test_known_prefixes(url, expected):
    assert to_async_url(url) == expected


def test_unknown_prefix_raises():
    with pytest.raises(ValueError, match="No async driver mapping"):
        to_async_url("mysql://db.internal/screening")
