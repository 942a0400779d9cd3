from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from app.models import StudyRecord, User  # noqa: F401  registers tables on SQLModel.metadata


def create_db_engine(database_url: str) -> Engine:
    """
    Build the SQLAlchemy engine for ``database_url``.

    SQLite connections are shared with the request threadpool, and an
    in-memory database is pinned to a single connection so every session
    sees the same tables.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=False, **kwargs)


def init_db(engine: Engine) -> None:
    """Initializes the database tables."""
    SQLModel.metadata.create_all(engine)


def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
