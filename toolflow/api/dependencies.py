"""FastAPI dependencies."""

import logging
from functools import lru_cache

from fastapi import HTTPException, Request

from toolflow.api.server import HttpToolServer
from toolflow.domain.errors import ResourceFetchError
from toolflow.domain.ports.config import AppConfig
from toolflow.infrastructure.config import load_config

logger = logging.getLogger(__name__)


@lru_cache
def get_config() -> AppConfig:
    """Load config once at startup."""
    return load_config()


async def get_tool_server(request: Request) -> HttpToolServer:
    """Tool server of the running app, with its tools registered.

    Raises 503 while a widget resource cannot be fetched; the next request retries.
    """
    server: HttpToolServer = request.app.state.tool_server
    try:
        await server.ensure_registered()
    except ResourceFetchError as e:
        logger.warning("Tool registration incomplete: %s", e)
        raise HTTPException(status_code=503, detail="Tool registration incomplete, retry shortly")
    return server
