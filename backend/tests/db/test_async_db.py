"""
Tests for the async database session and result table.
"""
import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import StoredAssessmentResult, get_db


async def test_async_session_executes(async_db: AsyncSession):
    """Async session can run a basic query."""
    result = await async_db.execute(text("SELECT 1"))
    assert result.scalar() == 1


async def test_stored_result_defaults(async_db: AsyncSession):
    """Rows get an id and a timezone-aware creation time."""
    row = StoredAssessmentResult(storage_key="testResults", test_id="memory", payload="{}")
    async_db.add(row)
    await async_db.commit()
    await async_db.refresh(row)

    assert row.id is not None
    assert row.created_at is not None

    stored = (
        await async_db.execute(
            select(StoredAssessmentResult).where(StoredAssessmentResult.id == row.id)
        )
    ).scalar_one()
    assert stored.test_id == "memory"


async def test_get_db_yields_session():
    """get_db dependency yields an AsyncSession."""
    gen = get_db()
    try:
        session = await gen.__anext__()
        assert isinstance(session, AsyncSession)
    finally:
        await gen.aclose()


@pytest.mark.asyncio
async def test_rollback_after_failed_insert(async_db: AsyncSession):
    """A failed insert can be rolled back and the session reused."""
    async_db.add(StoredAssessmentResult(storage_key="testResults", payload=None))
    with pytest.raises(IntegrityError):
        await async_db.commit()
    await async_db.rollback()

    result = await async_db.execute(select(StoredAssessmentResult))
    assert result.scalars().all() == []
