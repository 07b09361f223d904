"""Plain tool factory tests."""

from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from toolflow.application.tools import ToolConfig, ToolOutput, create_tool, register_tools
from toolflow.domain.entities.resources import UIResource


class GreetInput(BaseModel):
    name: str


async def greet(args: GreetInput, ctx) -> ToolOutput:
    return ToolOutput(text=f"Hello {args.name}", data={"name": args.name, "locale": ctx.meta.get("locale")})


def test_id_and_title_required_without_resource():
    with pytest.raises(ValueError, match="id"):
        create_tool(ToolConfig(description="d", input_model=GreetInput, title="T"), greet)
    with pytest.raises(ValueError, match="title"):
        create_tool(ToolConfig(description="d", input_model=GreetInput, id="t"), greet)


def test_id_and_title_default_to_resource():
    tool = create_tool(
        ToolConfig(description="d", input_model=GreetInput, resource=UIResource(id="card", title="Card")),
        greet,
    )
    assert (tool.id, tool.title) == ("card", "Card")


@pytest.mark.asyncio
async def test_plain_tool_returns_text_only():
    tool = create_tool(ToolConfig(id="greet", title="Greet", description="d", input_model=GreetInput), greet)
    wire = await tool.handle_tool_call({"name": "Ava"})
    assert wire["content"] == [{"type": "text", "text": "Hello Ava"}]
    assert "structuredContent" not in wire


@pytest.mark.asyncio
async def test_resource_tool_returns_structured_content_and_meta():
    resource = UIResource(id="card", title="Card", auto_height=True)
    tool = create_tool(
        ToolConfig(description="d", input_model=GreetInput, resource=resource, invoking="Drawing..."),
        greet,
    )
    wire = await tool.handle_tool_call({"name": "Ava"}, {"_meta": {"locale": "fr"}})
    assert wire["structuredContent"] == {"name": "Ava", "locale": "fr"}
    assert wire["_meta"]["openai/toolInvocation/invoking"] == "Drawing..."
    assert wire["_meta"]["ui"] == {"resourceUri": "ui://widgets/ext-apps/card.html", "autoHeight": True}
    assert wire["_meta"]["locale"] == "fr"


@pytest.mark.asyncio
async def test_invalid_arguments_return_error_result():
    tool = create_tool(ToolConfig(id="greet", title="Greet", description="d", input_model=GreetInput), greet)
    wire = await tool.handle_tool_call({})
    assert wire["isError"] is True
    assert wire["content"][0]["text"] == "Invalid arguments: name"


@pytest.mark.asyncio
async def test_register_tools_registers_everything():
    server = MagicMock()
    tools = [
        create_tool(ToolConfig(id=f"t{i}", title="T", description="d", input_model=GreetInput), greet)
        for i in range(3)
    ]
    await register_tools(server, tools)
    names = sorted(call.args[0] for call in server.register_tool.call_args_list)
    assert names == ["t0", "t1", "t2"]
    schema = server.register_tool.call_args.kwargs["input_schema"]
    assert schema["required"] == ["name"]
