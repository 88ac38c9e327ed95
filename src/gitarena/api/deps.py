"""FastAPI dependencies."""
from __future__ import annotations
from fastapi import Request
from gitarena.config import settings
from gitarena.services.dashboard_service import DashboardService
from gitarena.services.stats_service import StatsAggregator
from gitarena.services.telemetry_service import SystemTelemetryCollector
from gitarena.services.versions_service import ComponentVersionRegistry


def get_version_registry(request: Request) -> ComponentVersionRegistry:
    """Registry resolved once in the app lifespan."""
    return request.app.state.versions


def get_dashboard_service(request: Request) -> DashboardService:
    return DashboardService(
        stats=StatsAggregator(),
        telemetry=SystemTelemetryCollector(),
        versions=get_version_registry(request),
        timeout=settings.DASHBOARD_TIMEOUT,
    )
