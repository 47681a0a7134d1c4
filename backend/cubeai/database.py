"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine and provides
small helpers used by the application and tests. Without a configured
`DATABASE_URL` the database is a local SQLite file `app.db` located in
the `backend/` directory.
"""

from sqlmodel import SQLModel, create_engine, Session
from pathlib import Path
from .config import settings

BASE = Path(__file__).resolve().parent.parent
DB_URL = settings.DATABASE_URL or f"sqlite:///{BASE / 'app.db'}"


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(DB_URL, echo=False, connect_args=_connect_args(DB_URL))


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    This function is intended for local development and lightweight
    scripts; production deployments should rely on a proper migration
    tool (alembic) instead.
    """
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
