"""Repositories for the dashboard's entity tables. No business logic; caller owns the transaction."""
from __future__ import annotations
from sqlalchemy import func
from sqlmodel import Session, SQLModel, select, desc
from gitarena.domain.entities import EntityKind
from gitarena.models.core import Group, Repository, User


class EntityRepository:
    """Count and recency lookups over one entity table."""

    model: type[SQLModel]
    name_column: str

    def __init__(self, session: Session) -> None:
        self._s = session

    def count(self) -> int:
        return self._s.exec(select(func.count()).select_from(self.model)).one()

    def latest(self):
        """Newest row by ``created_at``; equal timestamps go to the later insert."""
        stmt = (
            select(self.model)
            .order_by(desc(self.model.created_at), desc(self.model.id))
            .limit(1)
        )
        return self._s.exec(stmt).first()

    def display_name(self, row) -> str:
        return getattr(row, self.name_column)


class UserRepository(EntityRepository):
    model = User
    name_column = "username"


class GroupRepository(EntityRepository):
    model = Group
    name_column = "name"


class RepositoryRepository(EntityRepository):
    model = Repository
    name_column = "name"

    def owner_username(self, repo_id: int) -> str | None:
        stmt = (
            select(User.username)
            .join(Repository, Repository.owner_id == User.id)
            .where(Repository.id == repo_id)
        )
        return self._s.exec(stmt).first()


_BY_KIND: dict[EntityKind, type[EntityRepository]] = {
    EntityKind.USER: UserRepository,
    EntityKind.GROUP: GroupRepository,
    EntityKind.REPOSITORY: RepositoryRepository,
}


def repository_for(kind: EntityKind, session: Session) -> EntityRepository:
    return _BY_KIND[EntityKind.parse(kind)](session)
