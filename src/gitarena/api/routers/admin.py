"""Admin dashboard endpoints."""
from fastapi import APIRouter, Depends
from gitarena.api.deps import get_dashboard_service, get_version_registry
from gitarena.api.schemas.dashboard import ComponentVersionRead, DashboardViewModel
from gitarena.services.dashboard_service import DashboardService
from gitarena.services.versions_service import ComponentVersionRegistry

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("", response_model=DashboardViewModel)
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardViewModel:
    return await service.build()


@router.get("/versions", response_model=list[ComponentVersionRead])
def list_versions(
    registry: ComponentVersionRegistry = Depends(get_version_registry),
) -> list[ComponentVersionRead]:
    return [
        ComponentVersionRead(name=v.name, version=v.version, description=v.description)
        for v in registry.list_versions()
    ]
