"""toolflow - stateless multi-step flows exposed as tools to AI agents."""

from toolflow.application.flows import (
    COMPLETE_STEP,
    CompiledFlow,
    DynamicFlow,
    StateGraph,
    create_dynamic_flow,
    create_flow,
)
from toolflow.application.tools import ToolConfig, ToolContext, ToolOutput, create_tool, register_tools
from toolflow.domain.entities.fields import field
from toolflow.domain.entities.graph import FlowConfig, ToolAnnotations
from toolflow.domain.entities.resources import UIResource
from toolflow.domain.entities.signals import END, START, interrupt, is_interrupt, is_widget, show_widget
from toolflow.domain.errors import FieldSchemaError, FlowError, GraphStructureError, ResourceFetchError
from toolflow.infrastructure.resources import ResourceConfig, WidgetCSP, create_resource

__version__ = "0.1.0"

__all__ = [
    "COMPLETE_STEP",
    "END",
    "START",
    "CompiledFlow",
    "DynamicFlow",
    "FieldSchemaError",
    "FlowConfig",
    "FlowError",
    "GraphStructureError",
    "ResourceConfig",
    "ResourceFetchError",
    "StateGraph",
    "ToolAnnotations",
    "ToolConfig",
    "ToolContext",
    "ToolOutput",
    "UIResource",
    "WidgetCSP",
    "create_dynamic_flow",
    "create_flow",
    "create_resource",
    "create_tool",
    "field",
    "interrupt",
    "is_interrupt",
    "is_widget",
    "register_tools",
    "show_widget",
]
