"""Signals returned by step handlers - interrupt (ask a question) or widget (show a UI resource).

A handler returns one of three things:
- a mapping -> partial state update, merged and auto-advanced
- InterruptSignal -> pause, ask the user, store the answer under `field`
- WidgetSignal -> pause, hand off to a UI resource with `data`

Signals are discriminated by their `kind` tag, never by subclassing.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, TypeGuard, Union

if TYPE_CHECKING:
    from toolflow.domain.entities.resources import UIResource

START = "__start__"
END = "__end__"

RESERVED_STEPS = frozenset({START, END})


@dataclass(frozen=True)
class InterruptSignal:
    """Pause the flow and ask the user a question."""

    question: str
    field: str  # State key the answer is stored under
    suggestions: list[str] | None = None
    context: str | None = None  # Extra guidance for the AI, not shown as the question
    kind: Literal["interrupt"] = "interrupt"


@dataclass(frozen=True)
class WidgetSignal:
    """Pause the flow and render a registered UI resource."""

    resource: "UIResource | str"  # Registered resource or bare resource id
    data: dict[str, Any] = field(default_factory=dict)
    description: str | None = None
    kind: Literal["widget"] = "widget"

    @property
    def widget_id(self) -> str:
        if isinstance(self.resource, str):
            return self.resource
        return self.resource.id


Signal = Union[InterruptSignal, WidgetSignal]


def interrupt(
    question: str,
    field: str,
    suggestions: list[str] | None = None,
    context: str | None = None,
) -> InterruptSignal:
    """Create an interrupt signal - pauses the flow and asks the user a text question."""
    if not field:
        raise ValueError("interrupt() requires a non-empty field name")
    return InterruptSignal(
        question=question,
        field=field,
        suggestions=list(suggestions) if suggestions else None,
        context=context,
    )


def show_widget(
    resource: "UIResource | str",
    data: dict[str, Any] | None = None,
    description: str | None = None,
) -> WidgetSignal:
    """Create a widget signal - pauses the flow and renders a widget UI."""
    return WidgetSignal(resource=resource, data=dict(data or {}), description=description)


def is_interrupt(value: Any) -> TypeGuard[InterruptSignal]:
    return getattr(value, "kind", None) == "interrupt" and isinstance(value, InterruptSignal)


def is_widget(value: Any) -> TypeGuard[WidgetSignal]:
    return getattr(value, "kind", None) == "widget" and isinstance(value, WidgetSignal)
