"""Dynamic field resolver - which fields are active, missing, invalid or waiting on a widget."""

import dataclasses
import inspect
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from toolflow.domain.entities.fields import (
    BooleanField,
    FieldDefinition,
    NumberField,
    SelectField,
    TextField,
    WidgetField,
)
from toolflow.domain.entities.flow_state import FlowState, is_empty
from toolflow.domain.errors import FieldSchemaError

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Outcome of one resolve pass over submitted data."""

    state: FlowState
    active: dict[str, FieldDefinition]
    missing: list[str]
    errors: dict[str, str]
    pending_widget: tuple[str, WidgetField] | None = None

    @property
    def is_complete(self) -> bool:
        return not self.missing and not self.errors and self.pending_widget is None

    @property
    def awaits_widget(self) -> bool:
        return not self.missing and not self.errors and self.pending_widget is not None

    def schema(self) -> dict[str, dict[str, Any]]:
        return {name: definition.to_schema() for name, definition in self.active.items()}

    def gathered(self) -> dict[str, Any]:
        return {name: self.state[name] for name in self.active if not is_empty(self.state.get(name))}


def _find_cycle(fields: Mapping[str, FieldDefinition]) -> list[str] | None:
    """Return one dependency cycle among declared fields, if any."""
    visiting: set[str] = set()
    done: set[str] = set()
    path: list[str] = []

    def visit(name: str) -> list[str] | None:
        visiting.add(name)
        path.append(name)
        for dep in fields[name].depends_on:
            if dep not in fields or dep in done:
                continue
            if dep in visiting:
                return path[path.index(dep):] + [dep]
            cycle = visit(dep)
            if cycle:
                return cycle
        visiting.discard(name)
        done.add(name)
        path.pop()
        return None

    for name in fields:
        if name not in done:
            cycle = visit(name)
            if cycle:
                return cycle
    return None


def validate_field_set(fields: Mapping[str, FieldDefinition]) -> None:
    """Reject field sets that could never be completed."""
    if not fields:
        raise FieldSchemaError("Dynamic flow needs at least one field")
    for name, definition in fields.items():
        if isinstance(definition, SelectField) and not definition.options:
            raise FieldSchemaError(f'Select field "{name}" has no options')
        if isinstance(definition, NumberField):
            if definition.min is not None and definition.max is not None and definition.min > definition.max:
                raise FieldSchemaError(f'Number field "{name}" has min greater than max')
        if isinstance(definition, WidgetField) and not definition.resource:
            raise FieldSchemaError(f'Widget field "{name}" needs a resource')
    cycle = _find_cycle(fields)
    if cycle:
        raise FieldSchemaError("Field dependency cycle: " + " -> ".join(cycle))


class FieldResolver:
    """Stateless resolve-and-validate pipeline over a fixed field set."""

    def __init__(self, fields: Mapping[str, FieldDefinition]) -> None:
        validate_field_set(fields)
        # Unlabelled fields are shown (and reported in errors) by name
        self._fields: dict[str, FieldDefinition] = {
            name: definition if definition.label else dataclasses.replace(definition, label=name)
            for name, definition in fields.items()
        }

    @property
    def fields(self) -> dict[str, FieldDefinition]:
        return dict(self._fields)

    def active_fields(self, state: FlowState) -> dict[str, FieldDefinition]:
        """Fields whose `when` passes and whose dependencies are all gathered."""
        active: dict[str, FieldDefinition] = {}
        for name, definition in self._fields.items():
            if definition.when is not None and not definition.when(dict(state)):
                continue
            if any(is_empty(state.get(dep)) for dep in definition.depends_on):
                continue
            active[name] = definition
        return active

    @staticmethod
    def coerce(value: Any, definition: FieldDefinition) -> Any:
        """Best-effort type coercion; values that cannot be coerced are left for validation."""
        if value is None:
            return value
        if isinstance(definition, NumberField):
            if isinstance(value, bool) or not isinstance(value, str):
                return value
            text = value.strip()
            if not text:
                return value
            try:
                return int(text)
            except ValueError:
                pass
            try:
                number = float(text)
            except ValueError:
                return value
            return number if math.isfinite(number) else value
        if isinstance(definition, BooleanField):
            if isinstance(value, str) and value.strip().lower() in ("true", "false"):
                return value.strip().lower() == "true"
            return value
        if isinstance(definition, WidgetField):
            return value
        return value if isinstance(value, str) else str(value)

    @staticmethod
    async def validate_value(value: Any, definition: FieldDefinition) -> str | None:
        """Error message for an invalid value, None when valid or empty."""
        if is_empty(value):
            return None
        label = definition.label

        if isinstance(definition, TextField):
            if not isinstance(value, str):
                return f"{label} must be text"
            if definition.validate is None:
                return None
            outcome = definition.validate(value)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if outcome is True:
                return None
            if isinstance(outcome, str) and outcome:
                return outcome
            return f"{label} is invalid"

        if isinstance(definition, SelectField):
            allowed = definition.option_values()
            if str(value) not in allowed:
                return f"{label} must be one of: {', '.join(allowed)}"
            return None

        if isinstance(definition, NumberField):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                return f"{label} must be a number"
            if definition.min is not None and value < definition.min:
                return f"{label} must be at least {definition.min}"
            if definition.max is not None and value > definition.max:
                return f"{label} must be at most {definition.max}"
            return None

        if isinstance(definition, BooleanField):
            if not isinstance(value, bool):
                return f"{label} must be true or false"
            return None

        # Widget values are validated by the widget itself
        return None

    async def resolve(self, current: FlowState, submitted: Mapping[str, Any] | None = None) -> Resolution:
        """Merge submitted values onto state, validate, and classify every field.

        Only declared fields are taken from `submitted`. Invalid values are dropped
        from state; dropping one can deactivate its dependents, so activity is
        recomputed until no new error appears.
        """
        state: FlowState = dict(current)
        for key, value in (submitted or {}).items():
            definition = self._fields.get(key)
            if definition is not None:
                state[key] = self.coerce(value, definition)

        errors: dict[str, str] = {}
        while True:
            active = self.active_fields(state)
            dropped = False
            for name, definition in active.items():
                value = state.get(name)
                if is_empty(value):
                    continue
                message = await self.validate_value(value, definition)
                if message:
                    errors[name] = message
                    state.pop(name, None)
                    dropped = True
            if not dropped:
                break

        missing = [
            name
            for name, definition in active.items()
            if definition.required and definition.type != "widget" and is_empty(state.get(name))
        ]
        pending_widget = next(
            (
                (name, definition)
                for name, definition in active.items()
                if isinstance(definition, WidgetField) and definition.required and is_empty(state.get(name))
            ),
            None,
        )
        logger.debug(
            "Resolved %d active fields: %d missing, %d errors", len(active), len(missing), len(errors)
        )
        return Resolution(
            state=state,
            active=active,
            missing=missing,
            errors=errors,
            pending_widget=pending_widget,
        )
