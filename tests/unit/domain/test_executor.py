"""FlowExecutor unit tests."""

import pytest

from toolflow.domain.entities.signals import END, START, interrupt, show_widget
from toolflow.domain.services.executor import FlowExecutor
from toolflow.domain.services.graph_builder import GraphBuilder


def make_executor(builder: GraphBuilder, max_iterations: int = 50) -> FlowExecutor:
    return FlowExecutor(builder.build(), flow_id="test", max_iterations=max_iterations)


class TestExecuteFrom:
    """Tests for the step loop."""

    @pytest.mark.asyncio
    async def test_runs_to_end_merging_updates(self):
        executor = make_executor(
            GraphBuilder()
            .add_node("a", lambda s: {"a": 1})
            .add_node("b", lambda s: {"b": s["a"] + 1})
            .add_edge(START, "a")
            .add_edge("a", "b")
            .add_edge("b", END)
        )
        result = await executor.execute_from("a", {"seed": True})
        assert result.status == "complete"
        assert result.payload["state"] == {"seed": True, "a": 1, "b": 2}

    @pytest.mark.asyncio
    async def test_none_update_advances_unchanged(self):
        executor = make_executor(GraphBuilder().add_node("a", lambda s: None).add_edge(START, "a").add_edge("a", END))
        result = await executor.execute_from("a", {"x": 1})
        assert result.payload == {"status": "complete", "state": {"x": 1}}

    @pytest.mark.asyncio
    async def test_interrupt_pauses_with_unmodified_state(self):
        executor = make_executor(
            GraphBuilder()
            .add_node("ask", lambda s: interrupt("Name?", field="name", suggestions=["Ava"]))
            .add_edge(START, "ask")
            .add_edge("ask", END)
        )
        result = await executor.execute_from("ask", {"x": 1})
        assert result.payload == {
            "status": "interrupt",
            "step": "ask",
            "question": "Name?",
            "field": "name",
            "suggestions": ["Ava"],
            "state": {"x": 1},
        }

    @pytest.mark.asyncio
    async def test_widget_pauses_with_flow_context(self):
        executor = make_executor(
            GraphBuilder()
            .add_node("pick", lambda s: show_widget("picker", data={"max": 3}))
            .add_edge(START, "pick")
            .add_edge("pick", END)
        )
        result = await executor.execute_from("pick", {"x": 1})
        assert result.status == "widget"
        assert result.payload["widgetId"] == "picker"
        assert result.structured_content == {
            "max": 3,
            "__flow": {"flowId": "test", "step": "pick", "state": {"x": 1}},
        }
        assert result.widget_meta["openai/outputTemplate"] == "ui://widgets/apps-sdk/picker.html"
        assert result.widget_meta["ui"] == {"resourceUri": "ui://widgets/ext-apps/picker.html"}

    @pytest.mark.asyncio
    async def test_async_handlers_and_selectors(self):
        async def load(state):
            return {"tier": "gold"}

        async def route(state):
            return "gold" if state["tier"] == "gold" else END

        executor = make_executor(
            GraphBuilder()
            .add_node("load", load)
            .add_node("gold", lambda s: {"perk": True})
            .add_edge(START, "load")
            .add_conditional_edge("load", route)
            .add_edge("gold", END)
        )
        result = await executor.execute_from("load", {})
        assert result.payload["state"] == {"tier": "gold", "perk": True}

    @pytest.mark.asyncio
    async def test_handler_receives_meta_when_it_accepts_it(self):
        seen = {}

        def handler(state, meta):
            seen.update(meta)
            return None

        executor = make_executor(GraphBuilder().add_node("a", handler).add_edge(START, "a").add_edge("a", END))
        await executor.execute_from("a", {}, {"userId": "u1"})
        assert seen == {"userId": "u1"}

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error_with_prior_state(self):
        def boom(state):
            raise RuntimeError("database down")

        executor = make_executor(
            GraphBuilder()
            .add_node("a", lambda s: {"a": 1})
            .add_node("b", boom)
            .add_edge(START, "a")
            .add_edge("a", "b")
            .add_edge("b", END)
        )
        result = await executor.execute_from("a", {})
        assert result.payload == {"status": "error", "step": "b", "error": "database down", "state": {"a": 1}}

    @pytest.mark.asyncio
    async def test_handler_cannot_mutate_caller_state(self):
        def mutate(state):
            state["leak"] = True
            return None

        original = {"x": 1}
        executor = make_executor(GraphBuilder().add_node("a", mutate).add_edge(START, "a").add_edge("a", END))
        result = await executor.execute_from("a", original)
        assert original == {"x": 1}
        assert result.payload["state"] == {"x": 1}

    @pytest.mark.asyncio
    async def test_selector_returning_unknown_step_is_error(self):
        executor = make_executor(
            GraphBuilder().add_node("a", lambda s: None).add_edge(START, "a").add_conditional_edge("a", lambda s: "nope")
        )
        result = await executor.execute_from("a", {})
        assert result.status == "error"
        assert result.payload["error"] == 'Unknown step: "nope"'

    @pytest.mark.asyncio
    async def test_selector_exception_is_error(self):
        def bad(state):
            raise KeyError("plan")

        executor = make_executor(GraphBuilder().add_node("a", lambda s: {"a": 1}).add_edge(START, "a").add_conditional_edge("a", bad))
        result = await executor.execute_from("a", {})
        assert result.status == "error"
        assert result.payload["step"] == "a"
        assert result.payload["state"] == {"a": 1}

    @pytest.mark.asyncio
    async def test_invalid_return_type_is_error(self):
        executor = make_executor(GraphBuilder().add_node("a", lambda s: 42).add_edge(START, "a").add_edge("a", END))
        result = await executor.execute_from("a", {})
        assert result.status == "error"
        assert 'Step "a" returned int' in result.payload["error"]

    @pytest.mark.asyncio
    async def test_cycle_hits_iteration_cap(self):
        executor = make_executor(
            GraphBuilder()
            .add_node("ping", lambda s: None)
            .add_node("pong", lambda s: None)
            .add_edge(START, "ping")
            .add_edge("ping", "pong")
            .add_edge("pong", "ping"),
            max_iterations=10,
        )
        result = await executor.execute_from("ping", {})
        assert result.status == "error"
        assert "exceeded maximum iterations" in result.payload["error"]

    @pytest.mark.asyncio
    async def test_end_reached_without_running_handlers(self):
        executor = make_executor(GraphBuilder().add_edge(START, END))
        result = await executor.execute_from(END, {"x": 1})
        assert result.payload == {"status": "complete", "state": {"x": 1}}
