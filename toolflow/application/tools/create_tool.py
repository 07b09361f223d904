"""Plain tools - a single handler, optionally rendering a UI resource."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from toolflow.application.flows.dto import TextContent, ToolCallResult
from toolflow.domain.entities.graph import ToolAnnotations
from toolflow.domain.entities.resources import UIResource, build_tool_meta
from toolflow.domain.ports.tool_server import RegisteredTool, ToolServer

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """Per-call context handed to tool handlers."""

    meta: dict[str, Any] = field(default_factory=dict)  # Raw request metadata from the host


@dataclass
class ToolOutput:
    """Handler result. `data` is only sent as structured content when the tool has a resource."""

    text: str
    data: dict[str, Any] | None = None


ToolHandler = Callable[[Any, ToolContext], Awaitable[ToolOutput]]


@dataclass(kw_only=True)
class ToolConfig:
    description: str  # Tells the model WHEN to use the tool
    input_model: type[BaseModel]
    id: str | None = None  # Defaults to resource.id
    title: str | None = None  # Defaults to resource.title
    resource: UIResource | None = None
    invoking: str = "Loading..."
    invoked: str = "Loaded"
    annotations: ToolAnnotations | None = None


class Tool:
    """A registrable tool built from a ToolConfig and a handler."""

    def __init__(self, config: ToolConfig, handler: ToolHandler) -> None:
        resource = config.resource
        tool_id = config.id or (resource.id if resource else None)
        title = config.title or (resource.title if resource else None)
        if not tool_id:
            raise ValueError("create_tool: `id` is required when no resource is provided")
        if not title:
            raise ValueError("create_tool: `title` is required when no resource is provided")

        self.id = tool_id
        self.title = title
        self.description = config.description
        self._config = config
        self._handler = handler
        self._tool_meta = build_tool_meta(resource, config.invoking, config.invoked) if resource else None

    async def handle_tool_call(self, arguments: dict[str, Any], extra: dict[str, Any] | None = None) -> dict[str, Any]:
        meta = dict((extra or {}).get("_meta") or {})
        try:
            args = self._config.input_model.model_validate(arguments or {})
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            return ToolCallResult(
                content=[TextContent(text=f"Invalid arguments: {fields}")],
                is_error=True,
            ).to_wire()

        output = await self._handler(args, ToolContext(meta=meta))

        if self._tool_meta is not None and output.data is not None:
            return ToolCallResult(
                content=[TextContent(text=output.text)],
                structured_content=output.data,
                meta={**self._tool_meta, **meta},
            ).to_wire()
        return ToolCallResult(content=[TextContent(text=output.text)]).to_wire()

    async def register(self, server: ToolServer) -> None:
        server.register_tool(
            self.id,
            title=self.title,
            description=self.description,
            input_schema=self._config.input_model.model_json_schema(by_alias=True),
            callback=self.handle_tool_call,
            annotations=self._config.annotations.to_wire() if self._config.annotations else None,
            meta=self._tool_meta,
        )
        logger.info("Registered tool %s", self.id)


def create_tool(config: ToolConfig, handler: ToolHandler) -> Tool:
    """Create a tool with minimal boilerplate.

    With `config.resource` the tool returns structured content plus widget
    metadata; without one it returns plain text.
    """
    return Tool(config, handler)


async def register_tools(server: ToolServer, tools: Iterable[RegisteredTool]) -> None:
    """Register tools, flows and resources on the server concurrently."""
    await asyncio.gather(*(t.register(server) for t in tools))
