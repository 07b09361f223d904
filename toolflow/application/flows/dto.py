"""Flow tool DTOs - request arguments and the host-facing call result."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from toolflow.domain.entities.results import ExecutionResult


class FlowToolInput(BaseModel):
    """Arguments of a static flow tool call."""

    action: Literal["start", "continue", "widget_result"] = Field(
        ...,
        description=(
            '"start" to begin the flow, "continue" after the user answers a question, '
            '"widget_result" when a widget returns data'
        ),
    )
    step: str | None = Field(None, description="Current step name (from the previous response)")
    state: dict[str, Any] | None = Field(None, description="Flow state - pass back exactly as received")
    answer: str | None = Field(None, description="The user's answer (for interrupt steps)")
    widget_result: dict[str, Any] | None = Field(
        None,
        alias="widgetResult",
        description="Data returned by a widget callback",
    )

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")


class DynamicFlowToolInput(BaseModel):
    """Arguments of a dynamic (field-gathering) flow tool call."""

    action: Literal["start", "submit", "widget_result"] = Field(
        ...,
        description='"start" to begin, "submit" to send gathered data, "widget_result" when a widget returns data',
    )
    data: dict[str, Any] | None = Field(None, description="Gathered field values to submit")
    step: str | None = Field(None, description="The widget field name (for widget_result action)")
    state: dict[str, Any] | None = Field(None, description="Flow state - pass back exactly as received")
    widget_result: dict[str, Any] | None = Field(
        None,
        alias="widgetResult",
        description="Data returned by a widget callback",
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallResult(BaseModel):
    """Tool call result as handed to the host transport."""

    content: list[TextContent]
    structured_content: dict[str, Any] | None = Field(None, serialization_alias="structuredContent")
    meta: dict[str, Any] = Field(default_factory=dict, serialization_alias="_meta")
    is_error: bool = Field(False, serialization_alias="isError")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def describe_validation_error(error: ValidationError, raw: dict[str, Any]) -> str:
    """Human-readable message for bad tool arguments."""
    for item in error.errors():
        if item.get("loc") == ("action",):
            if "action" not in raw:
                return 'Missing "action"'
            return f'Unknown action: "{raw.get("action")}"'
    fields = ", ".join(".".join(str(p) for p in item.get("loc", ())) or "arguments" for item in error.errors())
    return f"Invalid arguments: {fields}"


def to_call_result(result: ExecutionResult, request_meta: dict[str, Any] | None = None) -> ToolCallResult:
    """Text JSON + structured content; widget metadata merged with request metadata.

    Error results are flagged with isError so hosts can surface them.
    """
    return ToolCallResult(
        content=[TextContent(text=result.text)],
        structured_content=result.structured_content,
        meta={**(result.widget_meta or {}), **(request_meta or {})},
        is_error=result.status == "error",
    )
