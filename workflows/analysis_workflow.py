"""
LangGraph Workflow for the dispute analysis phase
"""
from typing import Any, AsyncIterator, Dict, Optional, Tuple

from langgraph.graph import StateGraph, END

from agents import (
    AnalysisState,
    WorkflowContext,
    run_orchestrator_agent,
    check_analysis_outcome,
    generate_resolution_agent,
    check_resolution_outcome,
    handle_error_agent
)
from models.analysis import DecisionSynthesisResult
from models.conversation import ConversationResult
from utils.logging_config import get_logger

logger = get_logger('workflows.analysis')


class AnalysisWorkflow:
    """
    Analysis graph: one orchestrator call, then resolution generation once a
    decision exists. Failures end in handle_error with a tagged error.
    """

    def __init__(self):
        self.workflow = self._create_workflow()

    def _create_workflow(self):
        workflow = StateGraph(AnalysisState)

        workflow.add_node("run_orchestrator", run_orchestrator_agent)
        workflow.add_node("generate_resolution", generate_resolution_agent)
        workflow.add_node("handle_error", handle_error_agent)

        workflow.add_conditional_edges(
            "run_orchestrator",
            check_analysis_outcome,
            {
                "decision": "generate_resolution",
                "no_decision": "handle_error",
                "failed": "handle_error"
            }
        )
        workflow.add_conditional_edges(
            "generate_resolution",
            check_resolution_outcome,
            {
                "resolved": END,
                "failed": "handle_error"
            }
        )
        workflow.add_edge("handle_error", END)

        workflow.set_entry_point("run_orchestrator")

        return workflow.compile()

    async def stream(
        self,
        case_id: str,
        run_id: int,
        conversation: ConversationResult,
        gateway=None,
        handoff_delay: float = 0.0,
        decision: Optional[DecisionSynthesisResult] = None
    ) -> AsyncIterator[Tuple[str, Dict[str, Any]]]:
        """
        Run the graph, yielding (node_name, update) as each node finishes
        """
        initial_state = AnalysisState(
            current_step="started",
            status="running",
            case_payload=conversation.to_case_payload(),
            handoff_delay=handoff_delay
        )
        if decision is not None:
            initial_state["decision_result"] = decision

        logger.info(f"Starting analysis run {run_id} for case {case_id}")
        with WorkflowContext(case_id, run_id, gateway):
            async for chunk in self.workflow.astream(initial_state, stream_mode="updates"):
                for node_name, update in chunk.items():
                    yield node_name, update or {}
        logger.info(f"Analysis run {run_id} for case {case_id} finished")
