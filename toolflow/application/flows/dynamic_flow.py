"""Dynamic flow tool - AI-driven field gathering with start/submit/widget_result."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union

from pydantic import ValidationError

from toolflow.application.flows.base import FlowTool
from toolflow.application.flows.dto import DynamicFlowToolInput, describe_validation_error
from toolflow.application.flows.protocol import DYNAMIC_PROTOCOL, with_protocol
from toolflow.domain.entities.fields import FieldDefinition, WidgetField
from toolflow.domain.entities.flow_state import FlowState
from toolflow.domain.entities.graph import FlowConfig, ToolAnnotations
from toolflow.domain.entities.results import (
    ExecutionResult,
    complete_result,
    error_result,
    gathering_result,
    widget_result,
)
from toolflow.domain.entities.signals import WidgetSignal, is_interrupt, is_widget, show_widget
from toolflow.domain.services.executor import describe_exception
from toolflow.domain.services.field_resolver import FieldResolver
from toolflow.domain.services.handlers import invoke

logger = logging.getLogger(__name__)

# Synthetic step name for a widget returned by the completion callback
COMPLETE_STEP = "__complete"

CompletionResult = Union[Mapping[str, Any], WidgetSignal, Any]
# (state) or (state, meta) -> result value | WidgetSignal, sync or async
CompletionHandler = Callable[..., Union[CompletionResult, Awaitable[CompletionResult]]]


class DynamicFlow(FlowTool):
    """Field set exposed as a single tool.

    Every call re-runs the whole resolve-and-validate pipeline over
    `state` + submitted `data`; submitting nothing returns the current schema.
    """

    input_model = DynamicFlowToolInput

    def __init__(
        self,
        config: FlowConfig,
        fields: Mapping[str, FieldDefinition],
        on_complete: CompletionHandler,
    ) -> None:
        super().__init__(
            config.id,
            config.title,
            with_protocol(config.description, DYNAMIC_PROTOCOL),
            config.annotations,
        )
        self.config = config
        self._resolver = FieldResolver(fields)
        self._on_complete = on_complete
        logger.info("Created dynamic flow %s (%d fields)", config.id, len(fields))

    @property
    def fields(self) -> dict[str, FieldDefinition]:
        return self._resolver.fields

    async def dispatch(self, arguments: dict[str, Any], meta: dict[str, Any]) -> ExecutionResult:
        try:
            args = DynamicFlowToolInput.model_validate(arguments)
        except ValidationError as e:
            raw_state = arguments.get("state")
            return error_result(
                describe_validation_error(e, arguments),
                state=raw_state if isinstance(raw_state, dict) else None,
            )

        state: FlowState = dict(args.state or {})
        if args.action in ("start", "submit"):
            return await self._submit(state, args.data or {}, meta)
        return await self._widget_result(args, state, meta)

    async def _widget_result(
        self,
        args: DynamicFlowToolInput,
        state: FlowState,
        meta: dict[str, Any],
    ) -> ExecutionResult:
        if not args.step:
            return error_result('Missing "step" for widget_result action', state=state)
        if args.widget_result is None:
            return error_result('Missing "widgetResult" for widget_result action', step=args.step, state=state)
        returned = dict(args.widget_result)

        if args.step == COMPLETE_STEP:
            return complete_result(state, returned, include_result=True)

        definition = self.fields.get(args.step)
        if not isinstance(definition, WidgetField):
            return error_result(f'Unknown widget field: "{args.step}"', step=args.step, state=state)

        # Satisfy the widget field even when the widget does not echo its own key
        if args.step not in returned:
            returned = {**returned, args.step: dict(returned)}
        return await self._submit(state, returned, meta)

    async def _submit(self, state: FlowState, data: Mapping[str, Any], meta: dict[str, Any]) -> ExecutionResult:
        resolution = await self._resolver.resolve(state, data)

        if resolution.awaits_widget:
            name, definition = resolution.pending_widget
            signal = show_widget(definition.resource, definition.data, definition.description)
            return widget_result(self.id, name, signal, resolution.state, field=name)

        if resolution.is_complete:
            return await self._complete(resolution.state, meta)

        return gathering_result(
            fields=resolution.schema(),
            gathered=resolution.gathered(),
            missing=resolution.missing,
            errors=resolution.errors,
            state=resolution.state,
        )

    async def _complete(self, state: FlowState, meta: dict[str, Any]) -> ExecutionResult:
        try:
            result = await invoke(self._on_complete, state, meta)
        except Exception as e:
            logger.warning("Flow %s: completion handler raised", self.id, exc_info=True)
            return error_result(describe_exception(e), step=COMPLETE_STEP, state=state)

        if is_widget(result):
            return widget_result(self.id, COMPLETE_STEP, result, state, field=COMPLETE_STEP)
        if is_interrupt(result):
            return error_result(
                "Completion handler cannot ask questions; declare a field instead",
                step=COMPLETE_STEP,
                state=state,
            )
        return complete_result(state, result, include_result=True)


def create_dynamic_flow(
    id: str,
    title: str,
    description: str,
    fields: Mapping[str, FieldDefinition],
    on_complete: CompletionHandler,
    annotations: ToolAnnotations | None = None,
) -> DynamicFlow:
    """Create an AI-driven dynamic flow.

    Unlike create_flow (a rigid graph of steps), this declares what data is
    needed and lets the AI decide how to gather it. Raises FieldSchemaError
    for field sets that could never complete (e.g. dependency cycles).
    """
    config = FlowConfig(id=id, title=title, description=description, annotations=annotations)
    return DynamicFlow(config, fields, on_complete)
