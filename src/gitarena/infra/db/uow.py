"""Unit of Work: one session per logical operation."""
from __future__ import annotations
from sqlmodel import Session
from gitarena.infra.db.engine import engine


class UnitOfWork:
    """Context manager owning one short-lived DB session.

    Dashboard lookups open one per query so that concurrent lookups never
    share a connection. Pending writes are committed on clean exit and rolled
    back on exception; the session is always closed.
    """

    def __init__(self) -> None:
        self._session: Session | None = None

    def __enter__(self) -> "UnitOfWork":
        self._session = Session(engine)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        session, self._session = self._session, None
        try:
            if exc_type is None:
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork is not active, use it as a context manager.")
        return self._session
