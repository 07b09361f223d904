"""Base flow tool - registration and host-facing call handling shared by both flow kinds."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from toolflow.application.flows.dto import to_call_result
from toolflow.domain.entities.graph import ToolAnnotations
from toolflow.domain.entities.results import ExecutionResult, error_result
from toolflow.domain.ports.tool_server import ToolServer

logger = logging.getLogger(__name__)


class FlowTool(ABC):
    """A flow exposed as one externally callable tool."""

    input_model: type[BaseModel]

    def __init__(
        self,
        flow_id: str,
        title: str,
        description: str,
        annotations: ToolAnnotations | None = None,
    ) -> None:
        self.id = flow_id
        self.title = title
        self.description = description
        self.annotations = annotations

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)

    @abstractmethod
    async def dispatch(self, arguments: dict[str, Any], meta: dict[str, Any]) -> ExecutionResult:
        """Run one action. May raise; call() converts failures to error results."""
        ...

    async def call(self, arguments: dict[str, Any] | None, meta: dict[str, Any] | None = None) -> ExecutionResult:
        """Handle one tool call. Always returns a result, never raises."""
        arguments = arguments if isinstance(arguments, dict) else {}
        try:
            result = await self.dispatch(arguments, dict(meta or {}))
        except Exception as e:
            logger.exception("Flow %s: unexpected failure", self.id)
            raw_state = arguments.get("state")
            return error_result(str(e) or type(e).__name__, state=raw_state if isinstance(raw_state, dict) else None)
        logger.debug("Flow %s: action=%s status=%s", self.id, arguments.get("action"), result.status)
        return result

    async def handle_tool_call(self, arguments: dict[str, Any], extra: dict[str, Any] | None = None) -> dict[str, Any]:
        """ToolServer callback: request metadata comes in `extra["_meta"]`."""
        meta = dict((extra or {}).get("_meta") or {})
        result = await self.call(arguments, meta)
        return to_call_result(result, meta).to_wire()

    async def register(self, server: ToolServer) -> None:
        """Register this flow as a tool on the host."""
        server.register_tool(
            self.id,
            title=self.title,
            description=self.description,
            input_schema=self.input_schema,
            callback=self.handle_tool_call,
            annotations=self.annotations.to_wire() if self.annotations else None,
        )
        logger.info("Registered flow tool %s", self.id)
