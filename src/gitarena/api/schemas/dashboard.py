"""Dashboard DTOs — pure Pydantic, zero ORM imports.

``DashboardViewModel`` is what a renderer consumes. Besides the nested
sections it exposes the flat field names templates use (``users_count``,
``latest_user``, ``memory_total`` ...) as computed fields.
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field

NOT_AVAILABLE = "n/a"
UNKNOWN = "unknown"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class LatestState(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


class LatestEntityView(_Frozen):
    id: int
    name: str
    url: str


class EntitySection(_Frozen):
    kind: str
    count: int | None
    count_display: str
    label: str
    list_url: str
    latest: LatestEntityView | None = None
    latest_state: LatestState


class LatestUser(_Frozen):
    id: int
    username: str


class LatestNamed(_Frozen):
    id: int
    name: str


class SystemSection(_Frozen):
    os: str
    version: str
    architecture: str
    uptime: str
    uptime_seconds: float | None = None
    memory_available: str
    memory_total: str
    memory_usage: str
    pid: str


class ComponentVersionRead(_Frozen):
    name: str
    version: str
    description: str | None = None


class DashboardViewModel(_Frozen):
    users: EntitySection
    groups: EntitySection
    repos: EntitySection
    latest_repo_username: str | None = None
    system: SystemSection
    versions: tuple[ComponentVersionRead, ...] = ()

    def _version(self, name: str) -> str:
        for component in self.versions:
            if component.name == name:
                return component.version
        return UNKNOWN

    # --- entity fields ---

    @computed_field
    @property
    def users_count(self) -> str:
        return self.users.count_display

    @computed_field
    @property
    def latest_user(self) -> LatestUser | None:
        latest = self.users.latest
        return LatestUser(id=latest.id, username=latest.name) if latest else None

    @computed_field
    @property
    def groups_count(self) -> str:
        return self.groups.count_display

    @computed_field
    @property
    def latest_group(self) -> LatestNamed | None:
        latest = self.groups.latest
        return LatestNamed(id=latest.id, name=latest.name) if latest else None

    @computed_field
    @property
    def repos_count(self) -> str:
        return self.repos.count_display

    @computed_field
    @property
    def latest_repo(self) -> LatestNamed | None:
        latest = self.repos.latest
        return LatestNamed(id=latest.id, name=latest.name) if latest else None

    # --- versions ---

    @computed_field
    @property
    def gitarena_version(self) -> str:
        return self._version("gitarena")

    @computed_field
    @property
    def python_version(self) -> str:
        return self._version("python")

    @computed_field
    @property
    def database_version(self) -> str:
        return self._version("database")

    @computed_field
    @property
    def libgit2_version(self) -> str:
        return self._version("libgit2")

    @computed_field
    @property
    def pygit2_version(self) -> str:
        return self._version("pygit2")

    # Names used by the original GitArena templates.

    @computed_field
    @property
    def rustc_version(self) -> str:
        return self.python_version

    @computed_field
    @property
    def postgres_version(self) -> str:
        return self.database_version

    @computed_field
    @property
    def git2_rs_version(self) -> str:
        return self.pygit2_version

    # --- system ---

    @computed_field
    @property
    def os(self) -> str:
        return self.system.os

    @computed_field
    @property
    def version(self) -> str:
        return self.system.version

    @computed_field
    @property
    def architecture(self) -> str:
        return self.system.architecture

    @computed_field
    @property
    def uptime(self) -> str:
        return self.system.uptime

    @computed_field
    @property
    def memory_available(self) -> str:
        return self.system.memory_available

    @computed_field
    @property
    def memory_total(self) -> str:
        return self.system.memory_total

    @computed_field
    @property
    def pid(self) -> str:
        return self.system.pid
