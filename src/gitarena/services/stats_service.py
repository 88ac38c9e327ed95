"""Entity counts and most-recent-record lookups for the admin dashboard."""
from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from gitarena.domain.entities import EntityKind, LatestEntity
from gitarena.domain.results import DataUnavailable
from gitarena.infra.db.repositories.entity_repository import RepositoryRepository, repository_for
from gitarena.infra.db.uow import UnitOfWork

logger = logging.getLogger(__name__)


class StatsAggregator:
    """Read-only queries against the entity store.

    Each call opens its own UnitOfWork, so lookups for different kinds can run
    on separate threads without sharing a session. Store failures come back as
    ``DataUnavailable``; an empty table is ``None`` from ``latest_entity``.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork] = UnitOfWork) -> None:
        self._uow_factory = uow_factory

    def count_entities(self, kind: EntityKind) -> int | DataUnavailable:
        kind = EntityKind.parse(kind)
        try:
            with self._uow_factory() as uow:
                return repository_for(kind, uow.session).count()
        except SQLAlchemyError as exc:
            return self._unavailable(f"{kind.value}.count", exc)

    def latest_entity(self, kind: EntityKind) -> LatestEntity | None | DataUnavailable:
        kind = EntityKind.parse(kind)
        try:
            with self._uow_factory() as uow:
                repo = repository_for(kind, uow.session)
                row = repo.latest()
                if row is None:
                    return None
                return LatestEntity(kind=kind, id=row.id, display_name=repo.display_name(row))
        except SQLAlchemyError as exc:
            return self._unavailable(f"{kind.value}.latest", exc)

    def repository_owner(self, repo_id: int) -> str | None | DataUnavailable:
        """Username of the user owning repository ``repo_id``."""
        try:
            with self._uow_factory() as uow:
                return RepositoryRepository(uow.session).owner_username(repo_id)
        except SQLAlchemyError as exc:
            return self._unavailable("repository.owner", exc)

    @staticmethod
    def _unavailable(source: str, exc: Exception) -> DataUnavailable:
        logger.warning("Store query %s failed: %s", source, exc)
        return DataUnavailable(source=source, reason=str(exc) or exc.__class__.__name__)
