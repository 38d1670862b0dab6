"""
Storage for completed screening assessment records.

Records are written once per completed session and read back for the
results view. Write failures roll back and raise ResultPersistenceError so
the caller can report them; a completed session is never silently lost.
Reads degrade instead: a stored payload that no longer decodes is logged
and treated as "no result available".

Usage:
    from app.core.result_store import save_assessment_record, load_latest_record

    await save_assessment_record(db, record, storage_key=settings.RESULTS_STORAGE_KEY)
    latest = await load_latest_record(db, settings.RESULTS_STORAGE_KEY)
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.graceful_failure import graceful_failure_decorator
from app.core.screening.errors import ResultPersistenceError
from app.models.models import StoredAssessmentResult
from app.schemas.assessments import AssessmentRecord

logger = logging.getLogger(__name__)


@graceful_failure_decorator("parse stored assessment record", default=None)
def parse_stored_record(payload: str) -> Optional[AssessmentRecord]:
    """
    Decode a stored JSON payload into an AssessmentRecord.

    Returns:
        The record, or None when the payload is malformed.
    """
    return AssessmentRecord.model_validate_json(payload)


def serialize_record(record: AssessmentRecord) -> str:
    """Encode a record in its camelCase wire format."""
    return record.model_dump_json(by_alias=True)


async def save_assessment_record(
    db: AsyncSession,
    record: AssessmentRecord,
    storage_key: str,
) -> StoredAssessmentResult:
    """
    Persist a completed assessment record.

    Args:
        db: Async database session
        record: Record to store
        storage_key: Key grouping this record with earlier results

    Returns:
        The stored row

    Raises:
        ResultPersistenceError: If the database write fails. The session is
            rolled back before raising.
    """
    row = StoredAssessmentResult(
        storage_key=storage_key,
        test_id=record.test_id,
        payload=serialize_record(record),
    )
    try:
        db.add(row)
        await db.commit()
        await db.refresh(row)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"Failed to save assessment record for test {record.test_id}: {e}",
            extra={"test_id": record.test_id},
        )
        raise ResultPersistenceError("save assessment record", e) from e

    logger.info(
        f"Saved assessment record {row.id} for test {record.test_id} "
        f"(risk_level={record.risk_level.value})",
        extra={"test_id": record.test_id, "risk_level": record.risk_level.value},
    )
    return row


def _records_query(storage_key: str, test_id: Optional[str]):
    query = select(StoredAssessmentResult).where(
        StoredAssessmentResult.storage_key == storage_key
    )
    if test_id is not None:
        query = query.where(StoredAssessmentResult.test_id == test_id)
    return query.order_by(
        StoredAssessmentResult.created_at.desc(), StoredAssessmentResult.id.desc()
    )


async def load_latest_record(
    db: AsyncSession,
    storage_key: str,
    test_id: Optional[str] = None,
) -> Optional[AssessmentRecord]:
    """
    Load the most recent record for a storage key.

    Args:
        db: Async database session
        storage_key: Key the records were saved under
        test_id: Only consider records for this test

    Returns:
        The newest record, or None when there is none or it is malformed.
    """
    result = await db.execute(_records_query(storage_key, test_id).limit(1))
    row = result.scalars().first()
    if row is None:
        return None
    return parse_stored_record(row.payload)


async def list_records(
    db: AsyncSession,
    storage_key: str,
    test_id: Optional[str] = None,
    limit: int = 50,
) -> List[AssessmentRecord]:
    """
    List stored records, newest first. Malformed rows are skipped.

    Args:
        db: Async database session
        storage_key: Key the records were saved under
        test_id: Only include records for this test
        limit: Maximum number of rows to read
    """
    result = await db.execute(_records_query(storage_key, test_id).limit(limit))
    records = []
    for row in result.scalars().all():
        record = parse_stored_record(row.payload)
        if record is not None:
            records.append(record)
    return records
