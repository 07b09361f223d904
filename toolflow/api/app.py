"""FastAPI app factory - serves registered tools, flows and resources over HTTP."""

from collections.abc import Iterable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from toolflow.api.routes.resources import router as resources_router
from toolflow.api.routes.tools import router as tools_router
from toolflow.api.server import HttpToolServer
from toolflow.domain.errors import ResourceFetchError
from toolflow.domain.ports.config import AppConfig
from toolflow.domain.ports.tool_server import RegisteredTool
from toolflow.shared.logging import setup_logging

log = structlog.get_logger()


def create_app(
    registrables: Iterable[RegisteredTool],
    config: AppConfig | None = None,
    *,
    configure_logging: bool = True,
) -> FastAPI:
    """Build the HTTP host for the given tools, flows and resources."""
    config = config or AppConfig()
    server = HttpToolServer.from_registrables(registrables)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: setup logging, register tools and resources."""
        if configure_logging:
            setup_logging(
                level=config.log_level,
                file_path=config.log_file or "",
                rotation_max_mb=config.log_rotation_max_mb,
                rotation_backups=config.log_rotation_backups,
            )
        log.info("startup_begin", pending=len(server.pending))
        try:
            await server.ensure_registered()
        except ResourceFetchError as e:
            # Widget host may be down at startup; the first request retries the rest
            log.warning("startup_registration_incomplete", reason=str(e), pending=len(server.pending))
        log.info("startup_complete", tools=len(server.tools), resources=len(server.resources))
        yield
        log.info("shutdown_complete")

    app = FastAPI(
        title="toolflow",
        version="0.1.0",
        description="Stateless tool-calling flows over HTTP",
        lifespan=lifespan,
    )
    app.state.tool_server = server
    app.state.config = config

    app.include_router(tools_router)
    app.include_router(resources_router)

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "service": "toolflow",
            "tools": len(server.tools),
            "resources": len(server.resources),
        }

    return app
