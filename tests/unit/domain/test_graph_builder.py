"""GraphBuilder structural validation tests."""

import pytest

from toolflow.domain.entities.graph import ConditionalEdge, DirectEdge
from toolflow.domain.entities.signals import END, START
from toolflow.domain.errors import GraphStructureError
from toolflow.domain.services.graph_builder import GraphBuilder


def noop(state):
    return None


def test_reserved_names_rejected():
    builder = GraphBuilder()
    with pytest.raises(GraphStructureError, match="reserved"):
        builder.add_node(START, noop)
    with pytest.raises(GraphStructureError, match="reserved"):
        builder.add_node(END, noop)


def test_duplicate_node_rejected():
    builder = GraphBuilder().add_node("a", noop)
    with pytest.raises(GraphStructureError, match='Node "a" already exists'):
        builder.add_node("a", noop)


def test_second_outgoing_edge_rejected():
    builder = GraphBuilder().add_node("a", noop).add_edge("a", END)
    with pytest.raises(GraphStructureError, match="add_conditional_edge"):
        builder.add_edge("a", "b")
    with pytest.raises(GraphStructureError, match="already has an outgoing edge"):
        builder.add_conditional_edge("a", lambda s: END)


def test_non_callable_handler_rejected():
    with pytest.raises(GraphStructureError):
        GraphBuilder().add_node("a", "not callable")  # type: ignore[arg-type]


def test_missing_start_edge_fails_regardless_of_content():
    builder = GraphBuilder().add_node("a", noop).add_edge("a", END)
    with pytest.raises(GraphStructureError, match="entry point"):
        builder.build()
    with pytest.raises(GraphStructureError, match="entry point"):
        GraphBuilder().build()


def test_start_edge_to_unknown_node_fails():
    builder = GraphBuilder().add_edge(START, "ghost")
    with pytest.raises(GraphStructureError, match='START edge references non-existent node: "ghost"'):
        builder.build()


def test_edge_from_unknown_node_fails():
    builder = GraphBuilder().add_node("a", noop).add_edge(START, "a").add_edge("a", END).add_edge("ghost", END)
    with pytest.raises(GraphStructureError, match='Edge from non-existent node: "ghost"'):
        builder.build()


def test_direct_edge_to_unknown_node_fails():
    builder = GraphBuilder().add_node("a", noop).add_edge(START, "a").add_edge("a", "ghost")
    with pytest.raises(GraphStructureError, match='references non-existent node: "ghost"'):
        builder.build()


def test_node_without_outgoing_edge_fails():
    builder = GraphBuilder().add_node("a", noop).add_node("b", noop).add_edge(START, "a").add_edge("a", END)
    with pytest.raises(GraphStructureError, match='Node "b" has no outgoing edge'):
        builder.build()


def test_start_directly_to_end_is_valid():
    graph = GraphBuilder().add_edge(START, END).build()
    assert graph.edges[START] == DirectEdge(target=END)


def test_valid_graph_builds_frozen_snapshot():
    builder = (
        GraphBuilder()
        .add_node("a", noop)
        .add_node("b", noop)
        .add_edge(START, "a")
        .add_conditional_edge("a", lambda s: "b")
        .add_edge("b", END)
    )
    graph = builder.build()
    assert set(graph.nodes) == {"a", "b"}
    assert isinstance(graph.edges["a"], ConditionalEdge)
    with pytest.raises(TypeError):
        graph.nodes["c"] = noop  # type: ignore[index]


def test_order_of_calls_does_not_matter():
    graph = GraphBuilder().add_edge(START, "a").add_edge("a", END).add_node("a", noop).build()
    assert "a" in graph.nodes
