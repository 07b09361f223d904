"""Flow state - the caller-owned data bag threaded through every call."""

from collections.abc import Mapping
from typing import Any

FlowState = dict[str, Any]


def is_empty(value: Any) -> bool:
    """Absent, null and empty-string values all count as not gathered."""
    return value is None or value == ""


def merge_state(state: Mapping[str, Any], update: Mapping[str, Any] | None) -> FlowState:
    """Shallow merge, later keys win. Never mutates `state`."""
    merged = dict(state)
    if update:
        merged.update(update)
    return merged
