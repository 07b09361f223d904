"""Graph builder - accumulates steps and edges, validates once at build time."""

import logging
from types import MappingProxyType

from toolflow.domain.entities.graph import (
    ConditionalEdge,
    DirectEdge,
    Edge,
    FlowGraph,
    Selector,
    StepHandler,
)
from toolflow.domain.entities.signals import END, RESERVED_STEPS, START
from toolflow.domain.errors import GraphStructureError

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Fluent builder for step graphs.

    Only name clashes are rejected eagerly; structure is checked in build(),
    so add_node/add_edge calls can come in any order.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, StepHandler] = {}
        self._edges: dict[str, Edge] = {}

    def add_node(self, name: str, handler: StepHandler) -> "GraphBuilder":
        """Register a step. START/END and duplicates are rejected."""
        if name in RESERVED_STEPS:
            raise GraphStructureError(f'"{name}" is a reserved name and cannot be used as a node name')
        if name in self._nodes:
            raise GraphStructureError(f'Node "{name}" already exists')
        if not callable(handler):
            raise GraphStructureError(f'Handler for node "{name}" must be callable')
        self._nodes[name] = handler
        return self

    def add_edge(self, source: str, target: str) -> "GraphBuilder":
        """Add a direct edge. Use START as source for the entry point, END as target to finish."""
        self._ensure_no_edge(source, hint=" Use add_conditional_edge for branching.")
        self._edges[source] = DirectEdge(target=target)
        return self

    def add_conditional_edge(self, source: str, selector: Selector) -> "GraphBuilder":
        """Add a branching edge; `selector(state)` returns the next step name."""
        if not callable(selector):
            raise GraphStructureError(f'Selector for node "{source}" must be callable')
        self._ensure_no_edge(source)
        self._edges[source] = ConditionalEdge(selector=selector)
        return self

    def _ensure_no_edge(self, source: str, hint: str = "") -> None:
        if source in self._edges:
            raise GraphStructureError(f'Node "{source}" already has an outgoing edge.{hint}')

    def validate(self) -> None:
        """Raise GraphStructureError if the graph cannot be executed."""
        start_edge = self._edges.get(START)
        if start_edge is None:
            raise GraphStructureError(
                'Flow must have an entry point. Add an edge from START: .add_edge(START, "first_node")'
            )
        if isinstance(start_edge, DirectEdge) and start_edge.target != END and start_edge.target not in self._nodes:
            raise GraphStructureError(f'START edge references non-existent node: "{start_edge.target}"')

        for source, edge in self._edges.items():
            if source != START and source not in self._nodes:
                raise GraphStructureError(f'Edge from non-existent node: "{source}"')
            if isinstance(edge, DirectEdge) and edge.target != END and edge.target not in self._nodes:
                raise GraphStructureError(f'Edge from "{source}" references non-existent node: "{edge.target}"')

        for name in self._nodes:
            if name not in self._edges:
                raise GraphStructureError(
                    f'Node "{name}" has no outgoing edge. '
                    f'Add one with .add_edge("{name}", ...) or .add_conditional_edge("{name}", ...)'
                )

    def build(self) -> FlowGraph:
        """Validate and freeze a snapshot; later builder calls do not affect it."""
        self.validate()
        graph = FlowGraph(
            nodes=MappingProxyType(dict(self._nodes)),
            edges=MappingProxyType(dict(self._edges)),
        )
        logger.debug("Graph built: %d nodes, %d edges", len(self._nodes), len(self._edges))
        return graph
