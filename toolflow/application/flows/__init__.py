"""Flow tools - static step graphs and dynamic field gathering."""

from toolflow.application.flows.dto import DynamicFlowToolInput, FlowToolInput, ToolCallResult
from toolflow.application.flows.dynamic_flow import COMPLETE_STEP, DynamicFlow, create_dynamic_flow
from toolflow.application.flows.state_graph import StateGraph, create_flow
from toolflow.application.flows.static_flow import RESUMING_META_KEY, CompiledFlow

__all__ = [
    "COMPLETE_STEP",
    "RESUMING_META_KEY",
    "CompiledFlow",
    "DynamicFlow",
    "DynamicFlowToolInput",
    "FlowToolInput",
    "StateGraph",
    "ToolCallResult",
    "create_dynamic_flow",
    "create_flow",
]
