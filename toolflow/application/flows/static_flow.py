"""Static flow tool - start/continue/widget_result over a compiled step graph."""

import logging
from typing import Any

from pydantic import ValidationError

from toolflow.application.flows.base import FlowTool
from toolflow.application.flows.dto import FlowToolInput, describe_validation_error
from toolflow.application.flows.protocol import FLOW_PROTOCOL, with_protocol
from toolflow.domain.entities.flow_state import FlowState, merge_state
from toolflow.domain.entities.graph import FlowConfig, FlowGraph
from toolflow.domain.entities.results import ExecutionResult, error_result
from toolflow.domain.entities.signals import START, is_interrupt
from toolflow.domain.services.executor import FlowExecutor, describe_exception, resolve_edge
from toolflow.domain.services.handlers import invoke

logger = logging.getLogger(__name__)

# Set in `meta` when a step handler is re-run only to recover its interrupt field
RESUMING_META_KEY = "toolflow/resuming"


class CompiledFlow(FlowTool):
    """Compiled step graph exposed as a single tool.

    Holds no per-call state: everything needed to resume travels in the
    caller-supplied `state` plus the `step` name.
    """

    input_model = FlowToolInput

    def __init__(self, config: FlowConfig, graph: FlowGraph, max_iterations: int) -> None:
        super().__init__(
            config.id,
            config.title,
            with_protocol(config.description, FLOW_PROTOCOL),
            config.annotations,
        )
        self.config = config
        self._executor = FlowExecutor(graph, flow_id=config.id, max_iterations=max_iterations)

    @property
    def graph(self) -> FlowGraph:
        return self._executor.graph

    async def dispatch(self, arguments: dict[str, Any], meta: dict[str, Any]) -> ExecutionResult:
        try:
            args = FlowToolInput.model_validate(arguments)
        except ValidationError as e:
            raw_state = arguments.get("state")
            return error_result(
                describe_validation_error(e, arguments),
                state=raw_state if isinstance(raw_state, dict) else None,
            )

        state: FlowState = dict(args.state or {})
        if args.action == "start":
            return await self._advance(START, state, meta)
        if args.action == "continue":
            return await self._continue(args, state, meta)
        return await self._widget_result(args, state, meta)

    async def _continue(self, args: FlowToolInput, state: FlowState, meta: dict[str, Any]) -> ExecutionResult:
        """Apply the answer to the field the paused step asked for, then advance.

        The paused step is re-run to learn its field. If that re-run raises or
        no longer returns an interrupt, the answer is not silently dropped while
        advancing: the call returns an error result and the state is unchanged.
        """
        if not args.step:
            return error_result('Missing "step" for continue action', state=state)
        if args.answer is None:
            return error_result('Missing "answer" for continue action', step=args.step, state=state)

        handler = self.graph.nodes.get(args.step)
        if handler is None:
            return error_result(f'Unknown step: "{args.step}"', step=args.step, state=state)

        # The field binding is not cached between calls, so re-run the paused step to recover it
        try:
            signal = await invoke(handler, state, {**meta, RESUMING_META_KEY: True})
        except Exception as e:
            logger.warning("Flow %s: re-running step %r raised", self.id, args.step, exc_info=True)
            return error_result(
                f'Could not resume step "{args.step}": {describe_exception(e)}',
                step=args.step,
                state=state,
            )
        if not is_interrupt(signal):
            return error_result(f'Step "{args.step}" is not waiting for an answer', step=args.step, state=state)

        return await self._advance(args.step, merge_state(state, {signal.field: args.answer}), meta)

    async def _widget_result(self, args: FlowToolInput, state: FlowState, meta: dict[str, Any]) -> ExecutionResult:
        if not args.step:
            return error_result('Missing "step" for widget_result action', state=state)
        if args.widget_result is None:
            return error_result('Missing "widgetResult" for widget_result action', step=args.step, state=state)
        if args.step not in self.graph.nodes:
            return error_result(f'Unknown step: "{args.step}"', step=args.step, state=state)
        return await self._advance(args.step, merge_state(state, args.widget_result), meta)

    async def _advance(self, step: str, state: FlowState, meta: dict[str, Any]) -> ExecutionResult:
        """Follow `step`'s outgoing edge and run from the next step."""
        edge = self._executor.edge_for(step)
        if edge is None:
            return error_result(f'No edge from step "{step}"', step=step, state=state)
        try:
            next_step = await resolve_edge(edge, state)
        except Exception as e:
            logger.warning("Flow %s: edge selector for %r raised", self.id, step, exc_info=True)
            return error_result(describe_exception(e), step=step, state=state)
        return await self._executor.execute_from(next_step, state, meta)
