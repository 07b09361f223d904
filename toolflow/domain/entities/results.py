"""Execution results - the only thing a flow returns to its caller."""

import json
from dataclasses import dataclass
from typing import Any, Literal

from toolflow.domain.entities.flow_state import FlowState
from toolflow.domain.entities.resources import build_flow_context, build_widget_meta
from toolflow.domain.entities.signals import InterruptSignal, WidgetSignal

ResultStatus = Literal["interrupt", "widget", "complete", "error", "gathering"]


@dataclass
class ExecutionResult:
    """Caller-facing outcome of one tool call.

    `payload` is the JSON document the AI reads. `structured` is sent as
    structured content (defaults to the payload; widgets send their data).
    """

    status: ResultStatus
    payload: dict[str, Any]
    structured: dict[str, Any] | None = None
    widget_meta: dict[str, Any] | None = None

    @property
    def text(self) -> str:
        return json.dumps(self.payload, ensure_ascii=False, default=str)

    @property
    def structured_content(self) -> dict[str, Any]:
        return self.structured if self.structured is not None else self.payload

    @property
    def state(self) -> FlowState | None:
        return self.payload.get("state")


def interrupt_result(step: str, signal: InterruptSignal, state: FlowState) -> ExecutionResult:
    payload: dict[str, Any] = {
        "status": "interrupt",
        "step": step,
        "question": signal.question,
        "field": signal.field,
    }
    if signal.suggestions:
        payload["suggestions"] = list(signal.suggestions)
    if signal.context:
        payload["context"] = signal.context
    payload["state"] = state
    return ExecutionResult(status="interrupt", payload=payload)


def widget_result(
    flow_id: str,
    step: str,
    signal: WidgetSignal,
    state: FlowState,
    field: str | None = None,
) -> ExecutionResult:
    payload: dict[str, Any] = {"status": "widget", "step": step}
    if field is not None:
        payload["field"] = field
    payload["widgetId"] = signal.widget_id
    if signal.description:
        payload["description"] = signal.description
    payload["state"] = state
    structured = {**signal.data, "__flow": build_flow_context(flow_id, step, state)}
    return ExecutionResult(
        status="widget",
        payload=payload,
        structured=structured,
        widget_meta=build_widget_meta(signal.resource),
    )


def complete_result(state: FlowState, result: Any = None, *, include_result: bool = False) -> ExecutionResult:
    payload: dict[str, Any] = {"status": "complete"}
    if include_result:
        payload["result"] = result
    payload["state"] = state
    return ExecutionResult(status="complete", payload=payload)


def error_result(message: str, step: str | None = None, state: FlowState | None = None) -> ExecutionResult:
    payload: dict[str, Any] = {"status": "error"}
    if step is not None:
        payload["step"] = step
    payload["error"] = message
    if state is not None:
        payload["state"] = state
    return ExecutionResult(status="error", payload=payload)


def gathering_result(
    fields: dict[str, dict[str, Any]],
    gathered: dict[str, Any],
    missing: list[str],
    errors: dict[str, str],
    state: FlowState,
) -> ExecutionResult:
    payload = {
        "status": "gathering",
        "fields": fields,
        "gathered": gathered,
        "missing": missing,
        "errors": errors,
        "state": state,
    }
    return ExecutionResult(status="gathering", payload=payload)
