"""Component versions shown on the dashboard, resolved once per process."""
from __future__ import annotations

import importlib
import logging
import platform
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError, version as package_version

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from gitarena.domain.entities import ComponentVersion
from gitarena.domain.results import VersionUnresolved

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
DIST_NAME = "gitarena-admin"

# Listed after gitarena, python and the database server, in this order.
DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("pygit2", "Python bindings for libgit2"),
    ("fastapi", "HTTP framework"),
    ("sqlmodel", "ORM layer"),
    ("sqlalchemy", "SQL toolkit"),
    ("pydantic", "Data validation"),
    ("psutil", "Host telemetry"),
)


def _libgit2_version() -> str:
    return importlib.import_module("pygit2").LIBGIT2_VERSION


def database_server_version(engine: Engine) -> tuple[str, str]:
    """Return ``(label, version)`` for the server behind ``engine``."""
    dialect = engine.dialect.name
    if dialect == "postgresql":
        query, label = "SHOW server_version", "PostgreSQL"
    elif dialect == "sqlite":
        query, label = "SELECT sqlite_version()", "SQLite"
    else:
        query, label = "SELECT version()", dialect
    with engine.connect() as conn:
        return label, str(conn.execute(text(query)).scalar_one())


class ComponentVersionRegistry:
    """Ordered, immutable list of component versions.

    Build it with ``resolve()`` during startup and hand the instance to
    whoever needs it; ``list_versions()`` never touches the outside world.
    """

    def __init__(self, versions: tuple[ComponentVersion, ...]) -> None:
        self._versions = tuple(versions)

    @classmethod
    def resolve(cls, engine: Engine | None = None) -> "ComponentVersionRegistry":
        unresolved: list[VersionUnresolved] = []

        def attempt(name: str, reader: Callable[[], str], description: str | None = None) -> ComponentVersion:
            try:
                return ComponentVersion(name, str(reader()), description)
            except (PackageNotFoundError, ImportError, AttributeError, SQLAlchemyError, OSError) as exc:
                unresolved.append(VersionUnresolved(name, str(exc) or exc.__class__.__name__))
                return ComponentVersion(name, UNKNOWN, description)

        versions = [
            attempt("gitarena", lambda: package_version(DIST_NAME), "GitArena admin"),
            attempt("python", platform.python_version, platform.python_implementation()),
        ]

        if engine is None:
            unresolved.append(VersionUnresolved("database", "no engine configured"))
            versions.append(ComponentVersion("database", UNKNOWN))
        else:
            try:
                label, server = database_server_version(engine)
                versions.append(ComponentVersion("database", server, label))
            except SQLAlchemyError as exc:
                unresolved.append(VersionUnresolved("database", str(exc)))
                versions.append(ComponentVersion("database", UNKNOWN))

        versions.append(attempt("libgit2", _libgit2_version, "Git implementation"))
        for dist, description in DEPENDENCIES:
            versions.append(attempt(dist, lambda dist=dist: package_version(dist), description))

        for item in unresolved:
            logger.warning("Version of %s unresolved: %s", item.name, item.reason)
        return cls(tuple(versions))

    def list_versions(self) -> tuple[ComponentVersion, ...]:
        return self._versions

    def get(self, name: str) -> str:
        for component in self._versions:
            if component.name == name:
                return component.version
        return UNKNOWN
