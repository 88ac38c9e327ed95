"""Engine singleton and schema bootstrap."""
from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, create_engine

from gitarena.config import settings


def _prepare_sqlite(url: str) -> dict:
    """Create the parent directory of a file-backed SQLite DB; return connect args."""
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    # Dashboard queries run on worker threads, each with its own session.
    return {"check_same_thread": False}


engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    connect_args=_prepare_sqlite(settings.DATABASE_URL) if settings.is_sqlite else {},
)


def init_db() -> None:
    from gitarena.infra.db.engine import engine as active_engine

    SQLModel.metadata.create_all(active_engine)
