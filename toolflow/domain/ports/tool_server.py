"""Tool Server Port - the host registry flows and resources are registered on."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

# (arguments, extra) -> tool call result document
ToolCallback = Callable[[dict[str, Any], dict[str, Any]], Awaitable[dict[str, Any]]]

# (uri) -> resource contents document
ResourceReader = Callable[[str], Awaitable[dict[str, Any]]]


class ToolServer(Protocol):
    """Interface for hosts that expose tools to an AI agent (MCP server, HTTP app, ...)."""

    def register_tool(
        self,
        name: str,
        *,
        title: str,
        description: str,
        input_schema: dict[str, Any],
        callback: ToolCallback,
        annotations: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        """Register a callable tool under `name`."""
        ...

    def register_resource(
        self,
        name: str,
        uri: str,
        *,
        title: str,
        description: str | None,
        mime_type: str,
        reader: ResourceReader,
        meta: dict[str, Any] | None = None,
    ) -> None:
        """Register a readable UI resource under `uri`."""
        ...


class RegisteredTool(Protocol):
    """Anything that can register itself on a ToolServer (tools, flows, resources)."""

    id: str
    title: str
    description: str | None

    async def register(self, server: ToolServer) -> None:
        ...
