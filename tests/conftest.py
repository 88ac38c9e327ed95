"""Shared test fixtures.

  use_test_engine  — redirects UoW + infra layer to a temp-file SQLite DB.
  seed             — helper that inserts users/groups/repositories with explicit timestamps.
  client           — FastAPI TestClient wired to the test engine.
"""
import os
from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import SQLModel, Session, create_engine


def pytest_configure(config):
    """Keep the import-time engine off the real data/ directory."""
    os.environ.setdefault("GITARENA_DATABASE_URL", "sqlite://")


@pytest.fixture
def use_test_engine(tmp_path, monkeypatch):
    """Monkeypatch infra/db engine references to an isolated temp-file SQLite DB.

    Uses a file (not :memory:) so dashboard queries on worker threads see the same data.
    """
    db_path = tmp_path / "test_gitarena.db"
    test_engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )

    import gitarena.models  # noqa: F401 — register all ORM mappers
    SQLModel.metadata.create_all(test_engine)

    monkeypatch.setattr("gitarena.infra.db.engine.engine", test_engine)
    monkeypatch.setattr("gitarena.infra.db.uow.engine", test_engine)

    yield test_engine

    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class Seeder:
    def __init__(self, engine) -> None:
        self._engine = engine

    def _add(self, row):
        with Session(self._engine) as s:
            s.add(row)
            s.commit()
            s.refresh(row)
            return row

    def user(self, username: str, minutes: int = 0):
        from gitarena.models.core import User
        return self._add(User(username=username, created_at=BASE_TIME + timedelta(minutes=minutes)))

    def group(self, name: str, minutes: int = 0):
        from gitarena.models.core import Group
        return self._add(Group(name=name, created_at=BASE_TIME + timedelta(minutes=minutes)))

    def repo(self, owner, name: str, minutes: int = 0):
        from gitarena.models.core import Repository
        return self._add(Repository(
            owner_id=owner.id, name=name, created_at=BASE_TIME + timedelta(minutes=minutes)
        ))


@pytest.fixture
def seed(use_test_engine):
    return Seeder(use_test_engine)


@pytest.fixture
def client(use_test_engine):
    """FastAPI TestClient backed by the isolated test engine."""
    from fastapi.testclient import TestClient
    from gitarena.api.app import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
