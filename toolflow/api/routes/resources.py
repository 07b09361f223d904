"""Resource API routes - widget HTML templates."""

from fastapi import APIRouter, Depends, HTTPException, Query

from toolflow.api.dependencies import get_tool_server
from toolflow.api.server import HttpToolServer

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get("")
async def list_resources(server: HttpToolServer = Depends(get_tool_server)) -> dict:
    return {"resources": [entry.describe() for entry in server.resources.values()]}


@router.get("/read")
async def read_resource(
    uri: str = Query(..., description="Resource URI, e.g. ui://widgets/apps-sdk/<id>.html"),
    server: HttpToolServer = Depends(get_tool_server),
) -> dict:
    if uri not in server.resources:
        raise HTTPException(status_code=404, detail=f'Unknown resource: "{uri}"')
    return await server.read_resource(uri)
