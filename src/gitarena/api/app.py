"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlmodel import SQLModel


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from gitarena.infra.db.engine import engine  # triggers WAL pragma + mapper registration
        from gitarena.logging import logger
        from gitarena.services.versions_service import ComponentVersionRegistry
        SQLModel.metadata.create_all(engine)
        app.state.versions = ComponentVersionRegistry.resolve(engine)
        logger.info("Resolved %d component versions", len(app.state.versions.list_versions()))
        yield

    app = FastAPI(
        title="GitArena Admin API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from gitarena.api.routers.admin import router as admin_router

    app.include_router(admin_router)

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app
