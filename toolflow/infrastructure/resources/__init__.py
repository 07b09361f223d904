from toolflow.infrastructure.resources.create_resource import (
    HtmlResource,
    ResourceConfig,
    WidgetCSP,
    create_resource,
)

__all__ = ["HtmlResource", "ResourceConfig", "WidgetCSP", "create_resource"]
