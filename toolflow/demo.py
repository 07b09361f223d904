"""Demonstration flows served by the reference app."""

from typing import Any

from pydantic import BaseModel, Field

from toolflow.application.flows import CompiledFlow, DynamicFlow, create_dynamic_flow, create_flow
from toolflow.application.tools import Tool, ToolConfig, ToolContext, ToolOutput, create_tool
from toolflow.domain.entities.fields import field
from toolflow.domain.entities.graph import ToolAnnotations
from toolflow.domain.entities.signals import END, START, interrupt, show_widget

PLANS = {"starter": 0, "pro": 29, "enterprise": 99}


def _route_by_plan(state: dict[str, Any]) -> str:
    return "pick_seats" if state.get("plan") == "enterprise" else "greet"


def _greet(state: dict[str, Any]) -> dict[str, Any]:
    seats = state.get("seats")  # Set by the seat picker widget
    suffix = f" with {seats} seats" if seats else ""
    return {"greeting": f"Welcome {state['name']}! You're on the {state['plan']} plan{suffix}."}


def build_onboarding_flow(max_iterations: int | None = None) -> CompiledFlow:
    """Static flow: name, plan, optional seat picker widget, greeting."""
    return (
        create_flow(
            "onboarding",
            "User Onboarding",
            "Use when a new user wants to get set up with an account and plan.",
            annotations=ToolAnnotations(open_world_hint=False),
        )
        .add_node("ask_name", lambda s: interrupt("What's your name?", field="name"))
        .add_node(
            "ask_plan",
            lambda s: interrupt(
                f"Which plan would you like, {s['name']}?",
                field="plan",
                suggestions=list(PLANS),
            ),
        )
        .add_node(
            "pick_seats",
            lambda s: show_widget("seat_picker", data={"min": 5, "max": 500}, description="Pick a seat count"),
        )
        .add_node("greet", _greet)
        .add_edge(START, "ask_name")
        .add_edge("ask_name", "ask_plan")
        .add_conditional_edge("ask_plan", _route_by_plan)
        .add_edge("pick_seats", "greet")
        .add_edge("greet", END)
        .compile(max_iterations=max_iterations)
    )


def _summarize_lead(state: dict[str, Any]) -> dict[str, Any]:
    monthly = PLANS[state["plan"]] * state["team_size"]
    return {
        "company": state["company"],
        "plan": state["plan"],
        "monthly_estimate": monthly,
        "qualified": monthly >= 100 or bool(state.get("needs_sso")),
    }


def build_lead_flow() -> DynamicFlow:
    """Dynamic flow: gathers lead details in any order."""
    return create_dynamic_flow(
        id="lead_qualification",
        title="Lead Qualification",
        description="Use when a prospect asks about buying for their team.",
        fields={
            "company": field.text(label="Company name"),
            "team_size": field.number(label="Team size", min=1, max=10000),
            "plan": field.select(label="Plan", options=[{"label": k.title(), "value": k} for k in PLANS]),
            "needs_sso": field.boolean(
                label="Needs SSO",
                depends_on=["plan"],
                when=lambda s: s.get("plan") == "enterprise",
            ),
            "notes": field.text(label="Notes", required=False),
        },
        on_complete=_summarize_lead,
        annotations=ToolAnnotations(read_only_hint=True, idempotent_hint=True),
    )


class PlanPriceInput(BaseModel):
    plan: str = Field(..., description="Plan name: starter, pro or enterprise")
    seats: int = Field(1, ge=1)


async def _plan_price(args: PlanPriceInput, ctx: ToolContext) -> ToolOutput:
    if args.plan not in PLANS:
        return ToolOutput(text=f"Unknown plan {args.plan!r}. Plans: {', '.join(PLANS)}")
    return ToolOutput(text=f"{args.plan} costs ${PLANS[args.plan] * args.seats}/month for {args.seats} seats")


def build_plan_price_tool() -> Tool:
    return create_tool(
        ToolConfig(
            id="plan_price",
            title="Plan Price",
            description="Use when the user asks what a plan costs.",
            input_model=PlanPriceInput,
            annotations=ToolAnnotations(read_only_hint=True),
        ),
        _plan_price,
    )


def build_demo_tools(max_iterations: int | None = None) -> list:
    return [build_onboarding_flow(max_iterations), build_lead_flow(), build_plan_price_tool()]
