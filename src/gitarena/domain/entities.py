"""Plain domain types shared by the dashboard services."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gitarena.domain.exceptions import UnknownEntityKindError
from gitarena.domain.results import FieldUnavailable


class EntityKind(str, Enum):
    USER = "user"
    GROUP = "group"
    REPOSITORY = "repository"

    @classmethod
    def parse(cls, value: "EntityKind | str") -> "EntityKind":
        try:
            return cls(value)
        except ValueError:
            raise UnknownEntityKindError(f"Unknown entity kind: {value!r}") from None


@dataclass(frozen=True, slots=True)
class LatestEntity:
    kind: EntityKind
    id: int
    display_name: str


@dataclass(frozen=True, slots=True)
class SystemSnapshot:
    """Point-in-time host/process metrics. Unreadable fields hold FieldUnavailable."""

    os_name: str | FieldUnavailable
    os_version: str | FieldUnavailable
    architecture: str | FieldUnavailable
    uptime_seconds: float | FieldUnavailable
    memory_available_bytes: int | FieldUnavailable
    memory_total_bytes: int | FieldUnavailable
    process_id: int | FieldUnavailable


@dataclass(frozen=True, slots=True)
class ComponentVersion:
    name: str
    version: str
    description: str | None = None
