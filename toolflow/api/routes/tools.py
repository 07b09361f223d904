"""Tool API routes - list and call registered tools and flows."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from toolflow.api.dependencies import get_tool_server
from toolflow.api.server import HttpToolServer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


class ToolCallRequest(BaseModel):
    """Body of a tool call: the tool arguments plus optional request metadata."""

    arguments: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] = Field(default_factory=dict, alias="_meta")

    model_config = ConfigDict(populate_by_name=True)


@router.get("")
async def list_tools(server: HttpToolServer = Depends(get_tool_server)) -> dict:
    """All registered tools with their input schemas."""
    return {"tools": [entry.describe() for entry in server.tools.values()]}


@router.post("/{name}")
async def call_tool(
    name: str,
    body: ToolCallRequest,
    server: HttpToolServer = Depends(get_tool_server),
) -> dict:
    """Call a tool. Flow errors come back as results with isError, not as HTTP errors."""
    if name not in server.tools:
        raise HTTPException(status_code=404, detail=f'Unknown tool: "{name}"')
    try:
        return await server.call_tool(name, body.arguments, body.meta)
    except Exception:
        logger.exception("Tool %s failed", name)
        raise HTTPException(status_code=500, detail="Tool execution failed")
