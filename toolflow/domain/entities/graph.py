"""Static flow graph - steps, edges and flow identity."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from toolflow.domain.entities.flow_state import FlowState
from toolflow.domain.entities.signals import InterruptSignal, WidgetSignal

HandlerResult = Union[Mapping[str, Any], InterruptSignal, WidgetSignal, None]

# (state) or (state, meta) -> partial state | signal, sync or async
StepHandler = Callable[..., Union[HandlerResult, Awaitable[HandlerResult]]]

# (state) -> next step name, sync or async
Selector = Callable[[FlowState], Union[str, Awaitable[str]]]


@dataclass(frozen=True)
class DirectEdge:
    target: str
    kind: Literal["direct"] = "direct"


@dataclass(frozen=True)
class ConditionalEdge:
    selector: Selector
    kind: Literal["conditional"] = "conditional"


Edge = Union[DirectEdge, ConditionalEdge]


class ToolAnnotations(BaseModel):
    """Hints about the tool's impact, passed through to the host."""

    read_only_hint: bool | None = Field(None, alias="readOnlyHint")
    idempotent_hint: bool | None = Field(None, alias="idempotentHint")
    open_world_hint: bool | None = Field(None, alias="openWorldHint")
    destructive_hint: bool | None = Field(None, alias="destructiveHint")

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, bool]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FlowConfig(BaseModel):
    """Identity of a flow - the id becomes the tool name."""

    id: str = Field(..., min_length=1, max_length=128)
    title: str
    description: str  # Tells the AI when to use this flow
    annotations: ToolAnnotations | None = None
    max_iterations: int | None = Field(None, ge=1)  # None = use FlowSettings


@dataclass(frozen=True)
class FlowGraph:
    """Validated, immutable step graph."""

    nodes: Mapping[str, StepHandler]
    edges: Mapping[str, Edge]
