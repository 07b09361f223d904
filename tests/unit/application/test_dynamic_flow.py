"""Dynamic flow tool tests - start/submit/widget_result."""

import pytest

from toolflow.application.flows import COMPLETE_STEP, create_dynamic_flow
from toolflow.domain.entities.fields import field
from toolflow.domain.entities.signals import interrupt, show_widget
from toolflow.domain.errors import FieldSchemaError


def make_flow(fields, on_complete=None):
    return create_dynamic_flow(
        id="intake",
        title="Intake",
        description="Collects intake details",
        fields=fields,
        on_complete=on_complete or (lambda state: {"ok": True}),
    )


@pytest.fixture
def plan_flow():
    return make_flow({"name": field.text(), "plan": field.select(options=["a", "b"])})


class TestSubmit:
    """Tests for start and submit."""

    @pytest.mark.asyncio
    async def test_start_returns_schema(self, plan_flow):
        result = await plan_flow.call({"action": "start"})
        assert result.status == "gathering"
        assert set(result.payload["fields"]) == {"name", "plan"}
        assert result.payload["missing"] == ["name", "plan"]
        assert result.payload["gathered"] == {}
        assert result.payload["state"] == {}

    @pytest.mark.asyncio
    async def test_invalid_select_end_to_end(self, plan_flow):
        result = await plan_flow.call({"action": "submit", "data": {"plan": "z"}, "state": {}})
        assert result.payload["status"] == "gathering"
        assert result.payload["missing"] == ["name", "plan"]
        assert result.payload["errors"] == {"plan": "plan must be one of: a, b"}
        assert result.payload["gathered"] == {}

    @pytest.mark.asyncio
    async def test_partial_then_complete(self, plan_flow):
        partial = await plan_flow.call({"action": "submit", "data": {"name": "Ava"}, "state": {}})
        assert partial.payload["gathered"] == {"name": "Ava"}
        assert partial.payload["missing"] == ["plan"]

        done = await plan_flow.call({"action": "submit", "data": {"plan": "b"}, "state": partial.payload["state"]})
        assert done.payload == {"status": "complete", "result": {"ok": True}, "state": {"name": "Ava", "plan": "b"}}

    @pytest.mark.asyncio
    async def test_resubmission_is_idempotent(self, plan_flow):
        args = {"action": "submit", "data": {"name": "Ava", "plan": "z"}, "state": {}}
        first = await plan_flow.call(args)
        second = await plan_flow.call(args)
        assert first.payload == second.payload

    @pytest.mark.asyncio
    async def test_completion_receives_state_and_meta(self):
        seen = {}

        async def finish(state, meta):
            seen.update(state=state, meta=meta)
            return f"Thanks {state['name']}"

        flow = make_flow({"name": field.text()}, on_complete=finish)
        result = await flow.call({"action": "submit", "data": {"name": "Ava"}}, {"userId": "u1"})
        assert result.payload["result"] == "Thanks Ava"
        assert seen == {"state": {"name": "Ava"}, "meta": {"userId": "u1"}}

    @pytest.mark.asyncio
    async def test_completion_exception_is_error(self):
        def finish(state):
            raise RuntimeError("CRM unavailable")

        flow = make_flow({"name": field.text()}, on_complete=finish)
        result = await flow.call({"action": "submit", "data": {"name": "Ava"}})
        assert result.payload == {
            "status": "error",
            "step": COMPLETE_STEP,
            "error": "CRM unavailable",
            "state": {"name": "Ava"},
        }

    @pytest.mark.asyncio
    async def test_completion_interrupt_is_error(self):
        flow = make_flow({"name": field.text()}, on_complete=lambda s: interrupt("More?", field="more"))
        result = await flow.call({"action": "submit", "data": {"name": "Ava"}})
        assert result.status == "error"


class TestWidgets:
    """Widget fields and widgets returned on completion."""

    @pytest.fixture
    def widget_flow(self):
        return make_flow(
            {
                "name": field.text(),
                "seats": field.widget("seat_picker", data={"max": 10}, description="Pick seats"),
            },
            on_complete=lambda s: {"seats": s["seats"]},
        )

    @pytest.mark.asyncio
    async def test_widget_shown_once_scalars_gathered(self, widget_flow):
        result = await widget_flow.call({"action": "submit", "data": {"name": "Ava"}})
        assert result.status == "widget"
        assert result.payload["step"] == "seats"
        assert result.payload["field"] == "seats"
        assert result.payload["widgetId"] == "seat_picker"
        assert result.structured_content["max"] == 10
        assert result.structured_content["__flow"]["flowId"] == "intake"

    @pytest.mark.asyncio
    async def test_widget_result_keyed_by_field(self, widget_flow):
        result = await widget_flow.call(
            {"action": "widget_result", "step": "seats", "widgetResult": {"seats": 4}, "state": {"name": "Ava"}}
        )
        assert result.payload["result"] == {"seats": 4}

    @pytest.mark.asyncio
    async def test_widget_result_without_own_key_is_wrapped(self, widget_flow):
        result = await widget_flow.call(
            {"action": "widget_result", "step": "seats", "widgetResult": {"count": 4}, "state": {"name": "Ava"}}
        )
        assert result.status == "complete"
        assert result.payload["state"]["seats"] == {"count": 4}

    @pytest.mark.asyncio
    async def test_widget_result_without_data_is_error(self, widget_flow):
        result = await widget_flow.call({"action": "widget_result", "step": "seats", "state": {"name": "Ava"}})
        assert result.payload == {
            "status": "error",
            "step": "seats",
            "error": 'Missing "widgetResult" for widget_result action',
            "state": {"name": "Ava"},
        }

    @pytest.mark.asyncio
    async def test_completion_widget_result_without_data_is_error(self):
        finished = []
        flow = make_flow({"name": field.text()}, on_complete=lambda s: finished.append(s) or show_widget("summary"))
        result = await flow.call({"action": "widget_result", "step": COMPLETE_STEP, "state": {"name": "Ava"}})
        assert result.status == "error"
        assert result.payload["step"] == COMPLETE_STEP
        assert finished == []

    @pytest.mark.asyncio
    async def test_widget_result_for_non_widget_field(self, widget_flow):
        result = await widget_flow.call({"action": "widget_result", "step": "name", "widgetResult": {}})
        assert result.status == "error"
        assert "Unknown widget field" in result.payload["error"]

    @pytest.mark.asyncio
    async def test_completion_widget_and_its_result(self):
        flow = make_flow({"name": field.text()}, on_complete=lambda s: show_widget("summary", data={"n": s["name"]}))
        shown = await flow.call({"action": "submit", "data": {"name": "Ava"}})
        assert shown.status == "widget"
        assert shown.payload["step"] == COMPLETE_STEP

        done = await flow.call(
            {"action": "widget_result", "step": COMPLETE_STEP, "widgetResult": {"confirmed": True}, "state": {"name": "Ava"}}
        )
        assert done.payload == {"status": "complete", "result": {"confirmed": True}, "state": {"name": "Ava"}}


class TestDefinition:
    """Creation-time checks and tool surface."""

    def test_cycle_rejected_at_creation(self):
        with pytest.raises(FieldSchemaError):
            make_flow({"a": field.text(depends_on=["b"]), "b": field.text(depends_on=["a"])})

    def test_description_carries_protocol(self, plan_flow):
        assert "DYNAMIC FORM PROTOCOL" in plan_flow.description

    @pytest.mark.asyncio
    async def test_unknown_action(self, plan_flow):
        result = await plan_flow.call({"action": "continue"})
        assert result.payload["error"] == 'Unknown action: "continue"'
