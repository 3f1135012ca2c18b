"""
Orchestrator Runner Agent - runs the dispute orchestrator and splits its sub-results
"""
import json

from agents.analysis_state import AnalysisState
from agents.extractors import coerce_payload
from agents.orchestration_splitter import split_orchestrator_result
from agents.workflow_context import get_current_case_id, invoke_agent
from models.agent_response import AgentRole
from models.case_state import ErrorKind
from utils.logging_config import get_logger

logger = get_logger('agents.orchestrator_runner')


async def run_orchestrator_agent(state: AnalysisState) -> dict:
    """Invoke the orchestrator once with the case payload"""
    current_case_id = get_current_case_id()

    logger.info(f"[ANALYSIS] Running dispute orchestrator for case {current_case_id}")
    envelope = await invoke_agent(json.dumps(state['case_payload']), AgentRole.ORCHESTRATOR)

    if not envelope.success:
        logger.error(f"[ANALYSIS] Orchestrator call failed for case {current_case_id}: {envelope.error}")
        return {
            'current_step': 'run_orchestrator',
            'status': 'failed',
            'error_kind': ErrorKind.ANALYSIS_FAILED,
            'error_message': envelope.error or 'Dispute orchestrator call failed'
        }

    split = split_orchestrator_result(envelope.result)
    summary = (coerce_payload(envelope.result) or {}).get('summary')

    logger.info(f"[ANALYSIS] Orchestrator completed for case {current_case_id}")
    update = {
        'current_step': 'run_orchestrator',
        'status': 'running',
        'orchestrator_summary': summary
    }
    # Absent buckets are left out so results from an earlier run survive
    for key, result in (('sql_result', split.sql), ('sop_result', split.sop), ('decision_result', split.decision)):
        if result is not None:
            update[key] = result
    return update


def check_analysis_outcome(state: AnalysisState) -> str:
    """Route after the orchestrator step"""
    if state.get('status') == 'failed':
        return 'failed'
    if state.get('decision_result') is None:
        logger.warning("[ANALYSIS] Orchestrator produced no decision, skipping resolution")
        return 'no_decision'
    return 'decision'
