"""DashboardService.build() with fake sources."""
import asyncio
import time

import pytest
from pydantic import ValidationError

from gitarena.api.schemas.dashboard import LatestState
from gitarena.domain.entities import ComponentVersion, EntityKind, LatestEntity, SystemSnapshot
from gitarena.domain.results import DataUnavailable, FieldUnavailable
from gitarena.services.dashboard_service import DashboardService, entity_label
from gitarena.services.versions_service import ComponentVersionRegistry

GIB = 1024 ** 3


class FakeStats:
    def __init__(self, counts=None, latest=None, owner="alice", fail=(), slow=(), delay=0.5):
        self.counts = counts or {EntityKind.USER: 5, EntityKind.GROUP: 2, EntityKind.REPOSITORY: 3}
        self.latest = latest if latest is not None else {
            EntityKind.USER: LatestEntity(EntityKind.USER, 7, "zoe"),
            EntityKind.GROUP: LatestEntity(EntityKind.GROUP, 2, "core"),
            EntityKind.REPOSITORY: LatestEntity(EntityKind.REPOSITORY, 11, "arena"),
        }
        self.owner = owner
        self.fail = set(fail)
        self.slow = set(slow)
        self.delay = delay

    def _maybe(self, source):
        if source in self.slow:
            time.sleep(self.delay)
        if source in self.fail:
            return DataUnavailable(source, "forced failure")
        return None

    def count_entities(self, kind):
        return self._maybe(f"{kind.value}.count") or self.counts[kind]

    def latest_entity(self, kind):
        return self._maybe(f"{kind.value}.latest") or self.latest.get(kind)

    def repository_owner(self, repo_id):
        return self._maybe("repository.owner") or self.owner


class FakeTelemetry:
    def __init__(self, snapshot=None, error=None):
        self._snapshot = snapshot or SystemSnapshot(
            os_name="Linux",
            os_version="6.1.0",
            architecture="x86_64",
            uptime_seconds=3725.0,
            memory_available_bytes=GIB,
            memory_total_bytes=2 * GIB,
            process_id=4242,
        )
        self._error = error

    def snapshot(self):
        if self._error:
            raise self._error
        return self._snapshot


REGISTRY = ComponentVersionRegistry((
    ComponentVersion("gitarena", "0.1.0"),
    ComponentVersion("python", "3.12.1"),
    ComponentVersion("database", "16.2", "PostgreSQL"),
    ComponentVersion("libgit2", "1.7.2"),
    ComponentVersion("pygit2", "1.14.1"),
))


def _build(stats=None, telemetry=None, registry=REGISTRY, timeout=2.0):
    service = DashboardService(stats or FakeStats(), telemetry or FakeTelemetry(), registry, timeout)
    return asyncio.run(service.build())


def test_full_view_model():
    view = _build()
    assert view.users_count == "5"
    assert view.users.label == "users"
    assert view.latest_user.username == "zoe"
    assert view.users.latest.url == "/admin/user/7"
    assert view.users.list_url == "/admin/users"
    assert view.groups_count == "2"
    assert view.latest_group.name == "core"
    assert view.groups.latest.url == "/admin/group/2"
    assert view.repos_count == "3"
    assert view.repos.label == "repositories"
    assert view.latest_repo.name == "arena"
    assert view.repos.latest.url == "/admin/repos/11"
    assert view.repos.list_url == "/admin/repos"
    assert view.latest_repo_username == "alice"
    assert view.gitarena_version == "0.1.0"
    assert view.python_version == "3.12.1"
    assert view.database_version == "16.2"
    assert view.libgit2_version == "1.7.2"
    assert view.pygit2_version == "1.14.1"
    assert view.rustc_version == "3.12.1"
    assert view.postgres_version == "16.2"
    assert view.git2_rs_version == "1.14.1"
    assert view.os == "Linux"
    assert view.version == "6.1.0"
    assert view.architecture == "x86_64"
    assert view.uptime == "1h 2m 5s"
    assert view.pid == "4242"


def test_memory_formatted():
    view = _build()
    assert view.memory_available == "1 GB"
    assert view.memory_total == "2 GB"
    assert view.system.memory_usage == "1 GB / 2 GB"


def test_labels_follow_counts():
    stats = FakeStats(counts={EntityKind.USER: 1, EntityKind.GROUP: 0, EntityKind.REPOSITORY: 1})
    view = _build(stats=stats)
    assert view.users.label == "user"
    assert view.groups.label == "groups"
    assert view.repos.label == "repository"
    assert entity_label(EntityKind.REPOSITORY, 3) == "repositories"


def test_repository_count_failure_keeps_other_sections():
    view = _build(stats=FakeStats(fail={"repository.count"}))
    assert view.repos_count == "n/a"
    assert view.repos.count is None
    assert view.repos.label == "repositories"
    assert view.users_count == "5"
    assert view.groups_count == "2"
    assert view.latest_user.username == "zoe"


def test_empty_store_is_not_an_error():
    stats = FakeStats(
        counts={EntityKind.USER: 0, EntityKind.GROUP: 0, EntityKind.REPOSITORY: 0},
        latest={},
    )
    view = _build(stats=stats)
    assert view.latest_user is None
    assert view.users.latest_state is LatestState.EMPTY
    assert view.users_count == "0"
    assert view.latest_repo_username is None


def test_latest_failure_is_marked_unavailable():
    view = _build(stats=FakeStats(fail={"group.latest"}))
    assert view.latest_group is None
    assert view.groups.latest_state is LatestState.UNAVAILABLE
    assert view.groups_count == "2"


def test_owner_failure_marks_username_only():
    view = _build(stats=FakeStats(fail={"repository.owner"}))
    assert view.latest_repo.name == "arena"
    assert view.latest_repo_username == "n/a"


def test_latest_repository_failure_is_not_reported_as_empty():
    view = _build(stats=FakeStats(fail={"repository.latest"}))
    assert view.repos.latest_state is LatestState.UNAVAILABLE
    assert view.latest_repo is None
    assert view.latest_repo_username == "n/a"
    assert view.repos_count == "3"


def test_repository_chain_shares_one_deadline():
    # each step fits the timeout alone, both together do not
    stats = FakeStats(slow={"repository.latest", "repository.owner"}, delay=0.3)
    view = _build(stats=stats, timeout=0.45)
    assert view.latest_repo.name == "arena"
    assert view.latest_repo_username == "n/a"


def test_slow_source_times_out_alone():
    stats = FakeStats(slow={"group.count"}, delay=1.0)
    view = _build(stats=stats, timeout=0.2)
    assert view.groups_count == "n/a"
    assert view.users_count == "5"
    assert view.repos_count == "3"


def test_sources_run_concurrently():
    stats = FakeStats(slow={"user.count", "group.count", "repository.count"}, delay=0.3)
    started = time.monotonic()
    view = _build(stats=stats)
    assert time.monotonic() - started < 0.8
    assert view.users_count == "5"


def test_unexpected_exception_does_not_escape():
    view = _build(telemetry=FakeTelemetry(error=RuntimeError("psutil exploded")))
    assert view.os == "unknown"
    assert view.memory_total == "unknown"
    assert view.users_count == "5"


def test_unreadable_fields_become_placeholders():
    snapshot = SystemSnapshot(
        os_name="Linux",
        os_version=FieldUnavailable("os_version", "denied"),
        architecture="aarch64",
        uptime_seconds=FieldUnavailable("uptime_seconds", "denied"),
        memory_available_bytes=FieldUnavailable("memory_available_bytes", "denied"),
        memory_total_bytes=2 * GIB,
        process_id=1,
    )
    view = _build(telemetry=FakeTelemetry(snapshot=snapshot))
    assert view.version == "unknown"
    assert view.uptime == "unknown"
    assert view.system.uptime_seconds is None
    assert view.memory_available == "unknown"
    assert view.memory_total == "2 GB"
    assert view.architecture == "aarch64"


def test_missing_versions_read_unknown():
    view = _build(registry=ComponentVersionRegistry(()))
    assert view.gitarena_version == "unknown"
    assert view.versions == ()


def test_view_model_is_immutable():
    view = _build()
    with pytest.raises(ValidationError):
        view.latest_repo_username = "mallory"


def test_contract_version_names_in_json():
    body = _build().model_dump(mode="json")
    assert body["rustc_version"] == body["python_version"]
    assert body["postgres_version"] == body["database_version"] == "16.2"
    assert body["git2_rs_version"] == body["pygit2_version"]
