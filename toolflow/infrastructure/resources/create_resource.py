"""UI resources - HTML widget templates registered in OpenAI and MCP Apps flavours."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from toolflow.domain.entities.resources import MIME_TYPE_MCP, MIME_TYPE_OPENAI, UIResource
from toolflow.domain.ports.config import ResourceSettings
from toolflow.domain.ports.tool_server import ToolServer
from toolflow.infrastructure.resources.html_fetcher import HtmlFetcher, join_url

logger = logging.getLogger(__name__)


class WidgetCSP(BaseModel):
    """Content Security Policy for a widget iframe."""

    connect_domains: list[str] | None = None  # fetch/XHR targets
    resource_domains: list[str] | None = None  # images, fonts, scripts, styles
    frame_domains: list[str] | None = None  # iframe embeds
    redirect_domains: list[str] | None = None  # openExternal without safe-link modal


class ResourceConfig(BaseModel):
    """Where a widget's HTML lives and how hosts should sandbox it."""

    id: str = Field(..., min_length=1)
    title: str
    description: str | None = None  # Describes WHAT the widget displays
    base_url: str
    html_path: str
    widget_domain: str
    prefers_border: bool = True
    auto_height: bool | None = None
    widget_csp: WidgetCSP | None = None

    model_config = ConfigDict(extra="forbid")


def build_openai_resource_meta(config: ResourceConfig) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "openai/widgetDescription": config.description,
        "openai/widgetPrefersBorder": config.prefers_border,
        "openai/widgetDomain": config.widget_domain,
    }
    if config.widget_csp is not None:
        meta["openai/widgetCSP"] = config.widget_csp.model_dump(exclude_none=True)
    return meta


def build_mcp_resource_meta(config: ResourceConfig) -> dict[str, Any]:
    ui: dict[str, Any] = {}
    if config.widget_csp is not None:
        csp = {
            "connectDomains": config.widget_csp.connect_domains,
            "resourceDomains": config.widget_csp.resource_domains,
            "frameDomains": config.widget_csp.frame_domains,
            "redirectDomains": config.widget_csp.redirect_domains,
        }
        ui["csp"] = {k: v for k, v in csp.items() if v is not None}
    ui["prefersBorder"] = config.prefers_border
    return {"ui": ui}


@dataclass(frozen=True)
class HtmlResource(UIResource):
    """UIResource backed by fetched HTML; usable anywhere a UIResource is accepted."""

    config: ResourceConfig | None = field(default=None, compare=False)
    fetcher: HtmlFetcher | None = field(default=None, compare=False, repr=False)

    async def register(self, server: ToolServer) -> None:
        """Fetch the HTML (once) and register both resource variants."""
        html = await self.fetcher.get()
        config = self.config

        async def read_openai(uri: str) -> dict[str, Any]:
            return {
                "contents": [
                    {
                        "uri": uri,
                        "mimeType": MIME_TYPE_OPENAI,
                        "text": html,
                        "_meta": build_openai_resource_meta(config),
                    }
                ]
            }

        async def read_mcp(uri: str) -> dict[str, Any]:
            return {
                "contents": [
                    {
                        "uri": uri,
                        "mimeType": MIME_TYPE_MCP,
                        "text": html,
                        "_meta": build_mcp_resource_meta(config),
                    }
                ]
            }

        server.register_resource(
            f"{self.id}-openai-widget",
            self.openai_uri,
            title=self.title,
            description=self.description,
            mime_type=MIME_TYPE_OPENAI,
            reader=read_openai,
            meta={
                "openai/widgetDescription": self.description,
                "openai/widgetPrefersBorder": config.prefers_border,
            },
        )
        server.register_resource(
            f"{self.id}-mcp-widget",
            self.mcp_uri,
            title=self.title,
            description=self.description,
            mime_type=MIME_TYPE_MCP,
            reader=read_mcp,
            meta={"ui": {"prefersBorder": config.prefers_border}},
        )
        logger.info("Registered resource %s (%d bytes of HTML)", self.id, len(html))


def create_resource(
    config: ResourceConfig,
    settings: ResourceSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HtmlResource:
    """Create a reusable UI resource that tools and flow steps can render.

    Usage:
        pricing_ui = create_resource(ResourceConfig(
            id="pricing_table", title="Pricing Table",
            base_url="https://my-app.com", html_path="/widgets/pricing",
            widget_domain="my-app.com",
        ))
        await pricing_ui.register(server)

    HTML is fetched lazily on the first `register()` and reused afterwards.
    """
    settings = settings or ResourceSettings()
    fetcher = HtmlFetcher(
        join_url(config.base_url, config.html_path),
        timeout=settings.fetch_timeout,
        retries=settings.fetch_retries,
        transport=transport,
    )
    return HtmlResource(
        id=config.id,
        title=config.title,
        description=config.description,
        auto_height=config.auto_height,
        config=config,
        fetcher=fetcher,
    )
