"""Plain (non-flow) tools."""

from toolflow.application.tools.create_tool import (
    Tool,
    ToolConfig,
    ToolContext,
    ToolOutput,
    create_tool,
    register_tools,
)

__all__ = ["Tool", "ToolConfig", "ToolContext", "ToolOutput", "create_tool", "register_tools"]
