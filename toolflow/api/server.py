"""HTTP tool server - in-process ToolServer registry backing the FastAPI routes."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from toolflow.domain.ports.tool_server import RegisteredTool, ResourceReader, ToolCallback

logger = logging.getLogger(__name__)


@dataclass
class ToolEntry:
    name: str
    title: str
    description: str
    input_schema: dict[str, Any]
    callback: ToolCallback
    annotations: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None

    def describe(self) -> dict[str, Any]:
        """Listing entry, in the shape tool-calling agents expect."""
        info: dict[str, Any] = {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
        if self.annotations:
            info["annotations"] = self.annotations
        if self.meta:
            info["_meta"] = self.meta
        return info


@dataclass
class ResourceEntry:
    name: str
    uri: str
    title: str
    description: str | None
    mime_type: str
    reader: ResourceReader
    meta: dict[str, Any] | None = None

    def describe(self) -> dict[str, Any]:
        info: dict[str, Any] = {
            "name": self.name,
            "uri": self.uri,
            "title": self.title,
            "mimeType": self.mime_type,
        }
        if self.description is not None:
            info["description"] = self.description
        if self.meta:
            info["_meta"] = self.meta
        return info


@dataclass
class HttpToolServer:
    """ToolServer implementation holding tools and resources for the HTTP host.

    Registrables passed in are registered once, on first use.
    """

    pending: list[RegisteredTool] = field(default_factory=list)
    tools: dict[str, ToolEntry] = field(default_factory=dict)
    resources: dict[str, ResourceEntry] = field(default_factory=dict)  # keyed by URI
    _registered: bool = field(default=False, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    @classmethod
    def from_registrables(cls, registrables: Iterable[RegisteredTool]) -> "HttpToolServer":
        return cls(pending=list(registrables))

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
        if name in self.tools:
            raise ValueError(f'Tool "{name}" is already registered')
        self.tools[name] = ToolEntry(name, title, description, input_schema, callback, annotations, meta)

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
        if uri in self.resources:
            raise ValueError(f'Resource "{uri}" is already registered')
        self.resources[uri] = ResourceEntry(name, uri, title, description, mime_type, reader, meta)

    async def ensure_registered(self) -> None:
        """Register pending tools, flows and resources (idempotent).

        Items that registered successfully leave `pending`; failed ones stay
        and are retried on the next call, after the first failure is raised.
        """
        if self._registered:
            return
        async with self._lock:
            if self._registered:
                return
            batch = list(self.pending)
            outcomes = await asyncio.gather(*(item.register(self) for item in batch), return_exceptions=True)
            failed = [(item, outcome) for item, outcome in zip(batch, outcomes) if isinstance(outcome, BaseException)]
            self.pending = [item for item, _ in failed]
            if failed:
                logger.warning("%d of %d registrations failed; will retry", len(failed), len(batch))
                raise failed[0][1]
            self._registered = True
            logger.info("Registered %d tools and %d resources", len(self.tools), len(self.resources))

    async def call_tool(self, name: str, arguments: dict[str, Any], meta: dict[str, Any] | None = None) -> dict[str, Any]:
        """Invoke a registered tool. Raises KeyError for unknown names."""
        entry = self.tools[name]
        return await entry.callback(arguments, {"_meta": meta or {}})

    async def read_resource(self, uri: str) -> dict[str, Any]:
        """Read a registered resource. Raises KeyError for unknown URIs."""
        entry = self.resources[uri]
        return await entry.reader(uri)
