"""StateGraph - LangGraph-style builder that compiles into a flow tool."""

import logging
from typing import Any

from toolflow.application.flows.static_flow import CompiledFlow
from toolflow.domain.entities.graph import FlowConfig
from toolflow.domain.services.executor import DEFAULT_MAX_ITERATIONS
from toolflow.domain.services.graph_builder import GraphBuilder

logger = logging.getLogger(__name__)


class StateGraph(GraphBuilder):
    """Step graph builder for tool flows.

    Usage:
        flow = (
            StateGraph(FlowConfig(id="onboarding", title="User Onboarding",
                                  description="Guides users through onboarding"))
            .add_node("ask_name", lambda s: interrupt("What's your name?", field="name"))
            .add_node("greet", lambda s: {"greeting": f"Hello {s['name']}!"})
            .add_edge(START, "ask_name")
            .add_edge("ask_name", "greet")
            .add_edge("greet", END)
            .compile()
        )
    """

    def __init__(self, config: FlowConfig) -> None:
        super().__init__()
        self.config = config

    def compile(self, max_iterations: int | None = None) -> CompiledFlow:
        """Validate the graph and return a registrable flow tool.

        Raises GraphStructureError on a malformed graph. `max_iterations` is the
        host-wide setting (FlowSettings.max_iterations). Cap precedence:
        FlowConfig.max_iterations, then the host-wide setting, then the default of 50.
        """
        graph = self.build()
        cap = self.config.max_iterations or max_iterations or DEFAULT_MAX_ITERATIONS
        logger.info("Compiled flow %s (%d steps, max_iterations=%d)", self.config.id, len(graph.nodes), cap)
        return CompiledFlow(self.config, graph, max_iterations=cap)


def create_flow(
    id: str | None = None,
    title: str | None = None,
    description: str | None = None,
    *,
    config: FlowConfig | None = None,
    **options: Any,
) -> StateGraph:
    """Create a new flow graph - convenience factory for StateGraph(FlowConfig(...))."""
    if config is None:
        config = FlowConfig(id=id, title=title or id, description=description or "", **options)
    return StateGraph(config)
