"""
Pytest configuration and shared fixtures for testing.
"""
import sys
from pathlib import Path

# Add project root to path so libs/ is importable (matches CI PYTHONPATH config)
# This must happen before importing from app/ which may import from libs/
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from contextlib import asynccontextmanager  # noqa: E402
from typing import Callable, List, Optional  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from libs.domain_types import DifficultyLevel, QuestionKind  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.screening import Question, QuestionResult  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Base, get_db  # noqa: E402
from app.services.assessments import SessionRegistry  # noqa: E402


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests. Tables are created by the db fixtures."""
    yield


# Neutralize the production lifespan on the singleton app.
app.router.lifespan_context = _test_lifespan


# SQLite test database. The path is relative to this file so the .db lands
# inside tests/ regardless of the working directory.
_TEST_DB = Path(__file__).parent / "test.db"
SQLALCHEMY_DATABASE_URL = f"sqlite:///{_TEST_DB}"
ASYNC_SQLALCHEMY_DATABASE_URL = f"sqlite+aiosqlite:///{_TEST_DB}"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)

# NullPool: every test (and TestClient) runs its own event loop, so pooled
# aiosqlite connections must not outlive one.
async_test_engine = create_async_engine(
    ASYNC_SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=NullPool,
)
AsyncTestingSessionLocal = async_sessionmaker(
    async_test_engine, class_=AsyncSession, expire_on_commit=False
)


# =============================================================================
# Deterministic time
# =============================================================================


class FakeClock:
    """Monotonic clock that only moves when advanced."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualCall:
    """Pending callback registered with a ManualScheduler."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler whose callbacks run only when the test advances it.

    Shares a FakeClock so that advancing the scheduler also advances the
    time seen by the session.
    """

    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.calls: List[ManualCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(self.clock() + delay, callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> List[ManualCall]:
        return [c for c in self.calls if not c.cancelled and not c.fired]

    def advance(self, seconds: float) -> None:
        """Move time forward and fire every callback that became due."""
        self.clock.advance(seconds)
        for call in list(self.pending):
            if call.due <= self.clock():
                call.fired = True
                call.callback()

    def fire_all(self) -> None:
        """Fire every pending callback regardless of its due time."""
        for call in list(self.pending):
            call.fired = True
            call.callback()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def manual_scheduler(fake_clock):
    return ManualScheduler(fake_clock)


# =============================================================================
# Questions and results
# =============================================================================


def _make_result(
    index: int = 0,
    is_correct: bool = True,
    difficulty: DifficultyLevel = DifficultyLevel.EASY,
    time_spent: float = 5.0,
    kind: QuestionKind = QuestionKind.SINGLE_CHOICE,
    partial_score: Optional[float] = None,
    max_score: float = 1.0,
) -> QuestionResult:
    """Build a QuestionResult; partial score defaults to full or zero credit."""
    if partial_score is None:
        partial_score = max_score if is_correct else 0.0
    return QuestionResult(
        question_index=index,
        kind=kind,
        is_correct=is_correct,
        partial_score=partial_score,
        max_score=max_score,
        time_spent_seconds=time_spent,
        difficulty=difficulty,
    )


@pytest.fixture
def make_result():
    """Factory fixture for QuestionResult values."""
    return _make_result


@pytest.fixture
def untimed_questions():
    """Three untimed questions: single choice, spelling, ordered sequence."""
    return [
        Question(
            QuestionKind.SINGLE_CHOICE,
            "Which word rhymes with 'light'?",
            2,
            DifficultyLevel.EASY,
            options=("Let", "Late", "Bright", "Look"),
        ),
        Question(
            QuestionKind.SPELLING_BLANK,
            "The sunset was _____ this evening.",
            "beautiful",
            DifficultyLevel.MEDIUM,
        ),
        Question(
            QuestionKind.ORDERED_SEQUENCE,
            "Arrange in ascending order",
            ("1", "2", "4", "7", "9"),
            DifficultyLevel.HARD,
            options=("7", "2", "9", "4", "1"),
        ),
    ]


@pytest.fixture
def timed_question():
    return Question(
        QuestionKind.ORDERED_SEQUENCE,
        "Recall in the same order",
        ("3", "7", "2", "9", "4"),
        DifficultyLevel.EASY,
        stimulus=("3", "7", "2", "9", "4"),
        presentation_duration_seconds=5,
    )


# =============================================================================
# Database and API client
# =============================================================================


@pytest.fixture(scope="function")
def db_tables():
    """
    Create all tables for a test and drop them afterwards.
    """
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest_asyncio.fixture
async def async_db(db_tables):
    """
    Async database session on the test database.
    """
    async with AsyncTestingSessionLocal() as session:
        yield session


@pytest.fixture(scope="function")
def client(db_tables, manual_scheduler, fake_clock):
    """
    Create a test client with database dependency override.

    Sessions started through the API use the manual scheduler and fake clock
    of the requesting test.
    """

    async def override_get_db():
        async with AsyncTestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    original_registry = app.state.session_registry
    app.state.session_registry = SessionRegistry(
        scheduler_factory=lambda: manual_scheduler,
        clock=fake_clock,
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )
    with TestClient(app) as test_client:
        yield test_client
    app.state.session_registry = original_registry
    app.dependency_overrides.clear()
