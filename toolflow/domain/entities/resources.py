"""UI resource references and the widget metadata built from them."""

from dataclasses import dataclass
from typing import Any

# OpenAI Apps SDK uses "text/html+skybridge", MCP Apps uses "text/html;profile=mcp-app"
MIME_TYPE_OPENAI = "text/html+skybridge"
MIME_TYPE_MCP = "text/html;profile=mcp-app"


def openai_uri_for(resource_id: str) -> str:
    return f"ui://widgets/apps-sdk/{resource_id}.html"


def mcp_uri_for(resource_id: str) -> str:
    return f"ui://widgets/ext-apps/{resource_id}.html"


@dataclass(frozen=True)
class UIResource:
    """Reference to an externally registered HTML resource."""

    id: str
    title: str = ""
    description: str | None = None
    openai_uri: str = ""
    mcp_uri: str = ""
    auto_height: bool | None = None

    def __post_init__(self) -> None:
        # Frozen dataclass: fill derived URIs through object.__setattr__
        if not self.openai_uri:
            object.__setattr__(self, "openai_uri", openai_uri_for(self.id))
        if not self.mcp_uri:
            object.__setattr__(self, "mcp_uri", mcp_uri_for(self.id))
        if not self.title:
            object.__setattr__(self, "title", self.id)


def as_resource(resource: "UIResource | str") -> UIResource:
    """Accept a resource object or a bare id."""
    if isinstance(resource, UIResource):
        return resource
    return UIResource(id=resource)


def build_widget_meta(resource: "UIResource | str") -> dict[str, Any]:
    """Widget hand-off metadata attached to a paused tool result."""
    res = as_resource(resource)
    return {
        "openai/outputTemplate": res.openai_uri,
        "openai/widgetAccessible": True,
        "openai/resultCanProduceWidget": True,
        "ui": {"resourceUri": res.mcp_uri},
    }


def build_tool_meta(
    resource: UIResource,
    invoking: str = "Loading...",
    invoked: str = "Loaded",
) -> dict[str, Any]:
    """Tool-level metadata for tools that always render a resource."""
    ui: dict[str, Any] = {"resourceUri": resource.mcp_uri}
    if resource.auto_height:
        ui["autoHeight"] = True
    return {
        "openai/outputTemplate": resource.openai_uri,
        "openai/toolInvocation/invoking": invoking,
        "openai/toolInvocation/invoked": invoked,
        "openai/widgetAccessible": True,
        "openai/resultCanProduceWidget": True,
        "ui": ui,
    }


def build_flow_context(flow_id: str, step: str, state: dict[str, Any]) -> dict[str, Any]:
    """`__flow` block carried in widget structured content so the widget can resume the flow."""
    return {"flowId": flow_id, "step": step, "state": state}
