"""
Screening assessment endpoints.

Flow for one test run:

    POST /assessments/sessions                 start a session for a test id
    POST /assessments/sessions/{id}/respond    open an untimed question for answers
    POST /assessments/sessions/{id}/submit     grade the answer and advance
    ...
    (after the last question the submit response carries the assessment,
     and the record is stored)

Timed memory questions open for answers on their own once the presentation
countdown finishes; poll GET /assessments/sessions/{id} to follow the phase.
"""
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from libs.domain_types import SessionPhase

from app.core.config import settings
from app.core.error_responses import (
    ErrorMessages,
    raise_for_screening_error,
    raise_not_found,
)
from app.core.result_store import (
    list_records,
    load_latest_record,
    save_assessment_record,
)
from app.core.screening import (
    ScreeningError,
    TestDefinition,
    get_test_definition,
)
from app.models import get_db
from app.schemas.assessments import (
    AbandonSessionResponse,
    AssessmentHistoryResponse,
    AssessmentResultResponse,
    SessionStateResponse,
    StartSessionRequest,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    TestCatalogResponse,
    TestDetailResponse,
)
from app.services.assessments import (
    RegisteredSession,
    SessionRegistry,
    build_assessment_record,
    catalog_summaries,
    describe_test,
    result_record,
    result_response,
    session_state,
)

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_HISTORY_LIMIT = 200


def get_catalog(request: Request) -> Dict[str, TestDefinition]:
    """Dependency returning the test catalog built at start-up."""
    return request.app.state.catalog


def get_registry(request: Request) -> SessionRegistry:
    """Dependency returning the running-session registry."""
    return request.app.state.session_registry


def _lookup_test(catalog: Dict[str, TestDefinition], test_id: str) -> TestDefinition:
    try:
        return get_test_definition(catalog, test_id)
    except ScreeningError as e:
        raise_for_screening_error(e)


def _lookup_session(registry: SessionRegistry, session_id: str) -> RegisteredSession:
    entry = registry.get(session_id)
    if entry is None:
        raise_not_found(ErrorMessages.session_not_found(session_id))
    return entry


# =============================================================================
# Catalog
# =============================================================================


@router.get("/tests", response_model=TestCatalogResponse)
async def list_tests(catalog: Dict[str, TestDefinition] = Depends(get_catalog)):
    """
    List every available screening test.
    """
    return TestCatalogResponse(tests=catalog_summaries(catalog.values()))


@router.get("/tests/{test_id}", response_model=TestDetailResponse)
async def get_test(
    test_id: str, catalog: Dict[str, TestDefinition] = Depends(get_catalog)
):
    """
    Get a screening test with its questions. Expected answers are never
    included.
    """
    return describe_test(_lookup_test(catalog, test_id))


# =============================================================================
# Sessions
# =============================================================================


@router.post("/sessions", response_model=SessionStateResponse, status_code=201)
async def start_session(
    request: StartSessionRequest,
    catalog: Dict[str, TestDefinition] = Depends(get_catalog),
    registry: SessionRegistry = Depends(get_registry),
):
    """
    Start a screening session for a test.

    The session begins presenting the first question. Timed questions open
    for answers when their countdown finishes; untimed questions need a
    call to the respond endpoint.
    """
    test = _lookup_test(catalog, request.test_id)
    entry = registry.start(test)
    return session_state(entry)


@router.get("/sessions/{session_id}", response_model=SessionStateResponse)
async def get_session(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
):
    """
    Get the current phase and question of a running session.
    """
    return session_state(_lookup_session(registry, session_id))


@router.post("/sessions/{session_id}/respond", response_model=SessionStateResponse)
async def begin_response(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
):
    """
    Open the current untimed question for answers.

    Returns 409 if the session is not presenting, or the question is timed.
    """
    entry = _lookup_session(registry, session_id)
    try:
        entry.session.begin_response()
    except ScreeningError as e:
        raise_for_screening_error(e)
    return session_state(entry)


@router.post("/sessions/{session_id}/submit", response_model=SubmitAnswerResponse)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    registry: SessionRegistry = Depends(get_registry),
    db: AsyncSession = Depends(get_db),
):
    """
    Grade the answer to the current question and advance the session.

    After the last question the session completes: the risk assessment is
    classified, stored under the configured results key, and returned in
    the `assessment` field. Finished sessions are removed from the registry.

    Returns 409 when the session is not accepting an answer (e.g. a repeated
    submit, or a timed question still presenting).
    """
    entry = _lookup_session(registry, session_id)
    session = entry.session

    try:
        result = session.submit(request.answer)
    except ScreeningError as e:
        raise_for_screening_error(e)

    phase = session.advance()
    assessment = None

    if phase == SessionPhase.COMPLETE:
        registry.discard(session_id)
        record = build_assessment_record(entry.test, session.assessment)
        try:
            await save_assessment_record(db, record, settings.RESULTS_STORAGE_KEY)
        except ScreeningError as e:
            raise_for_screening_error(e)
        assessment = result_response(record)
        logger.info(
            f"Session {session_id} completed test {entry.test.test_id} "
            f"with risk level {record.risk_level.value}",
            extra={
                "session_id": session_id,
                "test_id": entry.test.test_id,
                "risk_level": record.risk_level.value,
            },
        )

    return SubmitAnswerResponse(
        result=result_record(result),
        session=session_state(entry),
        assessment=assessment,
    )


@router.post("/sessions/{session_id}/abandon", response_model=AbandonSessionResponse)
async def abandon_session(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
):
    """
    Abandon a running session. Nothing is stored for abandoned sessions.
    """
    entry = _lookup_session(registry, session_id)
    try:
        entry.session.abandon()
    except ScreeningError as e:
        raise_for_screening_error(e)
    finally:
        registry.discard(session_id)

    return AbandonSessionResponse(
        session=session_state(entry),
        message="Session abandoned. No results were saved.",
    )


# =============================================================================
# Stored results
# =============================================================================


@router.get("/results/latest", response_model=AssessmentResultResponse)
async def get_latest_result(
    test_id: Optional[str] = Query(None, description="Only consider this test"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the most recent stored assessment with its interpretation.

    Returns 404 when no result is stored, or the stored result is malformed.
    """
    record = await load_latest_record(db, settings.RESULTS_STORAGE_KEY, test_id)
    if record is None:
        raise_not_found(ErrorMessages.NO_RESULTS_FOUND)
    return result_response(record)


@router.get("/results", response_model=AssessmentHistoryResponse)
async def list_results(
    test_id: Optional[str] = Query(None, description="Only include this test"),
    limit: Optional[int] = Query(
        None, ge=1, le=MAX_HISTORY_LIMIT, description="Maximum records to return"
    ),
    db: AsyncSession = Depends(get_db),
):
    """
    List stored assessments, newest first. Malformed records are skipped.
    """
    records = await list_records(
        db,
        settings.RESULTS_STORAGE_KEY,
        test_id=test_id,
        limit=limit or settings.RESULTS_HISTORY_LIMIT,
    )
    return AssessmentHistoryResponse(results=records, total_count=len(records))
