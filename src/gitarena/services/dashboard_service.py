"""Dashboard use-case service.

Fans out to the entity store, the telemetry collector and the version
registry concurrently, then folds every result (or failure) into one
immutable ``DashboardViewModel``. This is the only place failures become
placeholders; ``build()`` itself never raises.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from gitarena.api.schemas.dashboard import (
    NOT_AVAILABLE,
    UNKNOWN,
    ComponentVersionRead,
    DashboardViewModel,
    EntitySection,
    LatestEntityView,
    LatestState,
    SystemSection,
)
from gitarena.domain.entities import ComponentVersion, EntityKind, LatestEntity, SystemSnapshot
from gitarena.domain.results import DataUnavailable, FieldUnavailable
from gitarena.services.formatting import filesizeformat, format_duration, pluralize
from gitarena.services.stats_service import StatsAggregator
from gitarena.services.telemetry_service import SystemTelemetryCollector
from gitarena.services.versions_service import ComponentVersionRegistry

logger = logging.getLogger(__name__)

# kind -> (stem, singular suffix, plural suffix, list url, detail url prefix)
ENTITY_DISPLAY: dict[EntityKind, tuple[str, str, str, str, str]] = {
    EntityKind.USER: ("user", "", "s", "/admin/users", "/admin/user"),
    EntityKind.GROUP: ("group", "", "s", "/admin/groups", "/admin/group"),
    EntityKind.REPOSITORY: ("repositor", "y", "ies", "/admin/repos", "/admin/repos"),
}


def entity_label(kind: EntityKind, count: int | None) -> str:
    """``user``/``users``, ``repository``/``repositories``; unknown counts read as plural."""
    stem, singular, plural, _, _ = ENTITY_DISPLAY[kind]
    return stem + pluralize(count if count is not None else 0, singular, plural)


def build_entity_section(
    kind: EntityKind,
    count: int | DataUnavailable,
    latest: LatestEntity | None | DataUnavailable,
) -> EntitySection:
    _, _, _, list_url, detail_prefix = ENTITY_DISPLAY[kind]
    count_value = None if isinstance(count, DataUnavailable) else count

    if isinstance(latest, DataUnavailable):
        state, view = LatestState.UNAVAILABLE, None
    elif latest is None:
        state, view = LatestState.EMPTY, None
    else:
        state = LatestState.OK
        view = LatestEntityView(
            id=latest.id, name=latest.display_name, url=f"{detail_prefix}/{latest.id}"
        )

    return EntitySection(
        kind=kind.value,
        count=count_value,
        count_display=NOT_AVAILABLE if count_value is None else str(count_value),
        label=entity_label(kind, count_value),
        list_url=list_url,
        latest=view,
        latest_state=state,
    )


def _text(value: Any) -> str:
    return UNKNOWN if isinstance(value, FieldUnavailable) else str(value)


def _bytes(value: int | FieldUnavailable) -> str:
    return UNKNOWN if isinstance(value, FieldUnavailable) else filesizeformat(value)


def build_system_section(snapshot: SystemSnapshot | DataUnavailable) -> SystemSection:
    if isinstance(snapshot, DataUnavailable):
        return SystemSection(
            os=UNKNOWN, version=UNKNOWN, architecture=UNKNOWN, uptime=UNKNOWN,
            memory_available=UNKNOWN, memory_total=UNKNOWN,
            memory_usage=f"{UNKNOWN} / {UNKNOWN}", pid=UNKNOWN,
        )

    uptime = snapshot.uptime_seconds
    available = _bytes(snapshot.memory_available_bytes)
    total = _bytes(snapshot.memory_total_bytes)
    return SystemSection(
        os=_text(snapshot.os_name),
        version=_text(snapshot.os_version),
        architecture=_text(snapshot.architecture),
        uptime=UNKNOWN if isinstance(uptime, FieldUnavailable) else format_duration(uptime),
        uptime_seconds=None if isinstance(uptime, FieldUnavailable) else float(uptime),
        memory_available=available,
        memory_total=total,
        memory_usage=f"{available} / {total}",
        pid=_text(snapshot.process_id),
    )


class DashboardService:
    def __init__(
        self,
        stats: StatsAggregator,
        telemetry: SystemTelemetryCollector,
        versions: ComponentVersionRegistry,
        timeout: float = 5.0,
    ) -> None:
        self._stats = stats
        self._telemetry = telemetry
        self._versions = versions
        self._timeout = timeout

    async def _call(
        self, source: str, fn: Callable[..., Any], *args: Any, timeout: float | None = None,
    ) -> Any:
        """Run one blocking source call in a worker thread under its own timeout."""
        timeout = self._timeout if timeout is None else max(timeout, 0.0)
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Dashboard source %s timed out after %.1fs", source, timeout)
            return DataUnavailable(source=source, reason=f"timed out after {timeout}s")
        except Exception as exc:
            logger.exception("Dashboard source %s failed", source)
            return DataUnavailable(source=source, reason=str(exc) or exc.__class__.__name__)

    async def _latest_repository(self) -> tuple[Any, Any]:
        """Latest repository, then its owner, sharing one deadline."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout
        latest = await self._call(
            "repository.latest", self._stats.latest_entity, EntityKind.REPOSITORY
        )
        if isinstance(latest, DataUnavailable):
            return latest, latest
        if latest is None:
            return None, None
        owner = await self._call(
            "repository.owner", self._stats.repository_owner, latest.id,
            timeout=deadline - loop.time(),
        )
        return latest, owner

    async def build(self) -> DashboardViewModel:
        kinds = (EntityKind.USER, EntityKind.GROUP, EntityKind.REPOSITORY)
        (
            user_count, group_count, repo_count,
            latest_user, latest_group, (latest_repo, repo_owner),
            snapshot, versions,
        ) = await asyncio.gather(
            *(self._call(f"{k.value}.count", self._stats.count_entities, k) for k in kinds),
            self._call("user.latest", self._stats.latest_entity, EntityKind.USER),
            self._call("group.latest", self._stats.latest_entity, EntityKind.GROUP),
            self._latest_repository(),
            self._call("telemetry", self._telemetry.snapshot),
            self._call("versions", self._versions.list_versions),
        )

        if isinstance(repo_owner, DataUnavailable):
            repo_owner = NOT_AVAILABLE
        if isinstance(versions, DataUnavailable):
            versions = ()

        return DashboardViewModel(
            users=build_entity_section(EntityKind.USER, user_count, latest_user),
            groups=build_entity_section(EntityKind.GROUP, group_count, latest_group),
            repos=build_entity_section(EntityKind.REPOSITORY, repo_count, latest_repo),
            latest_repo_username=repo_owner,
            system=build_system_section(snapshot),
            versions=tuple(_version_read(v) for v in versions),
        )


def _version_read(component: ComponentVersion) -> ComponentVersionRead:
    return ComponentVersionRead(
        name=component.name, version=component.version, description=component.description
    )
