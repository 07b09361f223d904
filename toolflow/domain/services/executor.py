"""Static executor - runs steps until a pause, END, an error or the iteration cap."""

import logging
from collections.abc import Mapping
from typing import Any

from toolflow.domain.entities.flow_state import FlowState, merge_state
from toolflow.domain.entities.graph import DirectEdge, Edge, FlowGraph
from toolflow.domain.entities.results import (
    ExecutionResult,
    complete_result,
    error_result,
    interrupt_result,
    widget_result,
)
from toolflow.domain.entities.signals import END, is_interrupt, is_widget
from toolflow.domain.services.handlers import invoke

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 50


def describe_exception(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


async def resolve_edge(edge: Edge, state: FlowState) -> str:
    """Next step name for an edge; conditional selectors see the merged state."""
    if isinstance(edge, DirectEdge):
        return edge.target
    target = await invoke(edge.selector, state)
    if not isinstance(target, str):
        raise TypeError(f"Edge selector must return a step name, got {type(target).__name__}")
    return target


class FlowExecutor:
    """Executes a validated FlowGraph. Holds no per-call state."""

    def __init__(self, graph: FlowGraph, flow_id: str, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> None:
        self._graph = graph
        self._flow_id = flow_id
        self._max_iterations = max_iterations

    @property
    def graph(self) -> FlowGraph:
        return self._graph

    def edge_for(self, step: str) -> Edge | None:
        return self._graph.edges.get(step)

    async def execute_from(
        self,
        step: str,
        state: FlowState,
        meta: dict[str, Any] | None = None,
    ) -> ExecutionResult:
        """Run from `step` with `state`. Never raises for handler or selector failures."""
        current = step
        state = dict(state)

        for _ in range(self._max_iterations):
            if current == END:
                return complete_result(state)

            handler = self._graph.nodes.get(current)
            if handler is None:
                logger.warning("Flow %s: unknown step %r", self._flow_id, current)
                return error_result(f'Unknown step: "{current}"', step=current, state=state)

            try:
                result = await invoke(handler, state, meta)
            except Exception as e:
                logger.warning("Flow %s: step %r raised", self._flow_id, current, exc_info=True)
                return error_result(describe_exception(e), step=current, state=state)

            if is_interrupt(result):
                return interrupt_result(current, result, state)
            if is_widget(result):
                return widget_result(self._flow_id, current, result, state)
            if result is not None and not isinstance(result, Mapping):
                return error_result(
                    f'Step "{current}" returned {type(result).__name__}; expected a state update or a signal',
                    step=current,
                    state=state,
                )

            state = merge_state(state, result)
            edge = self.edge_for(current)
            if edge is None:
                return error_result(f'No outgoing edge from step "{current}"', step=current, state=state)
            try:
                current = await resolve_edge(edge, state)
            except Exception as e:
                logger.warning("Flow %s: edge selector for %r raised", self._flow_id, current, exc_info=True)
                return error_result(describe_exception(e), step=current, state=state)

        logger.warning("Flow %s: exceeded %d iterations at step %r", self._flow_id, self._max_iterations, current)
        return error_result(
            "Flow exceeded maximum iterations (possible infinite loop)",
            step=current,
            state=state,
        )
