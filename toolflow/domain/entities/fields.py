"""Field definitions for dynamic flows - what data to gather, not how."""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any, Literal, Union

from toolflow.domain.entities.flow_state import FlowState
from toolflow.domain.entities.resources import UIResource

# Return True if valid, or an error message (False -> generic message)
TextValidator = Callable[[str], "bool | str | Awaitable[bool | str]"]
WhenPredicate = Callable[[FlowState], bool]


@dataclass(frozen=True)
class SelectOption:
    """Labelled option; validation compares against `value`."""

    label: str
    value: str


@dataclass(kw_only=True)
class BaseField:
    """Attributes shared by every field kind."""

    label: str = ""  # Empty = use the field name
    description: str | None = None
    required: bool = True
    hint: str | None = None  # How the AI should ask: tone, follow-ups
    depends_on: list[str] = dataclass_field(default_factory=list)
    when: WhenPredicate | None = None

    def to_schema(self) -> dict[str, Any]:
        """Serialized schema for the AI - functions stripped."""
        schema: dict[str, Any] = {
            "type": self.type,  # type: ignore[attr-defined]
            "label": self.label,
            "required": self.required,
        }
        if self.description:
            schema["description"] = self.description
        if self.hint:
            schema["hint"] = self.hint
        if self.depends_on:
            schema["dependsOn"] = list(self.depends_on)
        return schema


@dataclass(kw_only=True)
class TextField(BaseField):
    type: Literal["text"] = "text"
    validate: TextValidator | None = None


@dataclass(kw_only=True)
class SelectField(BaseField):
    type: Literal["select"] = "select"
    options: list[Union[str, SelectOption]] = dataclass_field(default_factory=list)

    def option_values(self) -> list[str]:
        return [o if isinstance(o, str) else o.value for o in self.options]

    def to_schema(self) -> dict[str, Any]:
        schema = super().to_schema()
        schema["options"] = [
            o if isinstance(o, str) else {"label": o.label, "value": o.value} for o in self.options
        ]
        return schema


@dataclass(kw_only=True)
class NumberField(BaseField):
    type: Literal["number"] = "number"
    min: float | None = None
    max: float | None = None

    def to_schema(self) -> dict[str, Any]:
        schema = super().to_schema()
        if self.min is not None:
            schema["min"] = self.min
        if self.max is not None:
            schema["max"] = self.max
        return schema


@dataclass(kw_only=True)
class BooleanField(BaseField):
    type: Literal["boolean"] = "boolean"


@dataclass(kw_only=True)
class WidgetField(BaseField):
    type: Literal["widget"] = "widget"
    resource: UIResource | str
    data: dict[str, Any] = dataclass_field(default_factory=dict)


FieldDefinition = Union[TextField, SelectField, NumberField, BooleanField, WidgetField]


def _normalize_options(options: Sequence[Any]) -> list[Union[str, SelectOption]]:
    normalized: list[Union[str, SelectOption]] = []
    for option in options:
        if isinstance(option, (str, SelectOption)):
            normalized.append(option)
        elif isinstance(option, Mapping):
            value = str(option["value"])
            normalized.append(SelectOption(label=str(option.get("label", value)), value=value))
        else:
            normalized.append(str(option))
    return normalized


class FieldFactory:
    """Field definition helpers.

    Usage:
        fields = {
            "name": field.text(label="Full name"),
            "plan": field.select(label="Plan", options=["starter", "pro"]),
            "seats": field.number(label="Seats", min=1),
            "agreed": field.boolean(label="Agrees to terms"),
        }
    """

    @staticmethod
    def text(label: str = "", **kwargs: Any) -> TextField:
        return TextField(label=label, **kwargs)

    @staticmethod
    def select(label: str = "", options: Sequence[Any] = (), **kwargs: Any) -> SelectField:
        return SelectField(label=label, options=_normalize_options(options), **kwargs)

    @staticmethod
    def number(label: str = "", **kwargs: Any) -> NumberField:
        return NumberField(label=label, **kwargs)

    @staticmethod
    def boolean(label: str = "", **kwargs: Any) -> BooleanField:
        return BooleanField(label=label, **kwargs)

    @staticmethod
    def widget(resource: UIResource | str, label: str = "", **kwargs: Any) -> WidgetField:
        return WidgetField(resource=resource, label=label, **kwargs)


field = FieldFactory()
