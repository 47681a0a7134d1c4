from pathlib import Path
import os
import tempfile
import pytest
from sqlmodel import SQLModel, Session, create_engine

# Point the app at a throwaway SQLite file before `cubeai` is imported.
TEST_DB_PATH = Path(tempfile.gettempdir()) / "cubeai_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("JWT_SECRET", "test-secret-for-the-project-api-suite")
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

from cubeai import models  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def reset_db():
    """Remove the test database file once the session finishes."""
    yield
    if TEST_DB_PATH.exists():
        try:
            TEST_DB_PATH.unlink()
        except OSError:
            pass


@pytest.fixture
def session():
    """An isolated in-memory database session for repository tests."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


@pytest.fixture
def member_factory():
    def _make(member_id: int) -> models.Member:
        return models.Member(
            id=member_id,
            oauth_id=f"oauth-{member_id}",
            nickname=f"user-{member_id}",
            profile_url="url",
        )
    return _make
