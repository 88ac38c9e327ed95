import asyncio
import json
import sys
from dataclasses import fields
import typer
from gitarena.config import settings
from gitarena.logging import logger, get_run_id

app = typer.Typer(no_args_is_help=True)

@app.callback()
def main():
    """
    GitArena admin CLI.
    """
    pass

@app.command(name="doctor")
def doctor():
    """
    Check configuration, database connectivity and telemetry access.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\nGitArena Admin Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    print(f"  Run ID: {get_run_id()}")
    passed += 1

    # ── Check 2: Configuration ──────────────────────────────────────────────
    print("\n[Configuration]")
    print(f"  GITARENA_DATABASE_URL:       {settings.DATABASE_URL}")
    print(f"  GITARENA_DASHBOARD_TIMEOUT:  {settings.DASHBOARD_TIMEOUT}")
    print(f"  GITARENA_LOG_LEVEL:          {settings.LOG_LEVEL}")

    # ── Check 3: Database ────────────────────────────────────────────────────
    print("\n[Database]")
    from sqlalchemy.exc import SQLAlchemyError
    from gitarena.infra.db.engine import engine
    from gitarena.services.versions_service import database_server_version
    try:
        label, server = database_server_version(engine)
        print(f"  {label}: OK ({server})")
        passed += 1
    except SQLAlchemyError as e:
        print("  Database: FAILED")
        failures.append(f"Cannot reach {settings.DATABASE_URL}: {e}")

    # ── Check 4: Telemetry ───────────────────────────────────────────────────
    print("\n[Telemetry]")
    from gitarena.domain.results import FieldUnavailable
    from gitarena.services.telemetry_service import SystemTelemetryCollector
    snapshot = SystemTelemetryCollector().snapshot()
    missing = [f.name for f in fields(snapshot) if isinstance(getattr(snapshot, f.name), FieldUnavailable)]
    if missing:
        print(f"  Unreadable fields: {', '.join(missing)}")
    else:
        print("  All fields readable")
    passed += 1

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  FAIL {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed")
        print()


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")

@db_app.command("init")
def init():
    """Initialize the database tables."""
    from sqlalchemy.exc import SQLAlchemyError
    from gitarena.db import init_db
    try:
        init_db()
        logger.info("Database initialized successfully.")
    except SQLAlchemyError as e:
        logger.error(f"Failed to initialize database: {e}")
        raise typer.Exit(code=1)


def _registry():
    from gitarena.infra.db.engine import engine
    from gitarena.services.versions_service import ComponentVersionRegistry
    return ComponentVersionRegistry.resolve(engine)


@app.command(name="versions")
def versions():
    """Print the component version list."""
    for component in _registry().list_versions():
        note = f"  ({component.description})" if component.description else ""
        print(f"{component.name:<12} {component.version}{note}")


@app.command(name="dashboard")
def dashboard():
    """Build the admin dashboard once and print it as JSON."""
    from gitarena.services.dashboard_service import DashboardService
    from gitarena.services.stats_service import StatsAggregator
    from gitarena.services.telemetry_service import SystemTelemetryCollector

    service = DashboardService(
        stats=StatsAggregator(),
        telemetry=SystemTelemetryCollector(),
        versions=_registry(),
        timeout=settings.DASHBOARD_TIMEOUT,
    )
    view = asyncio.run(service.build())
    print(json.dumps(view.model_dump(mode="json"), indent=2))


@app.command(name="serve")
def serve(host: str = "127.0.0.1", port: int = 8000):
    """Run the admin API with uvicorn."""
    import uvicorn
    uvicorn.run("gitarena.api.app:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":
    app()
