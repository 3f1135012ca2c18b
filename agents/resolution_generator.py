"""
Resolution Generator Agent - turns the synthesized decision into a customer-facing resolution
"""
import asyncio
import json

from agents.analysis_state import AnalysisState
from agents.extractors import extract_customer_resolution_result
from agents.workflow_context import get_current_case_id, invoke_agent
from models.agent_response import AgentRole
from models.case_state import ErrorKind
from utils.logging_config import get_logger

logger = get_logger('agents.resolution_generator')


async def generate_resolution_agent(state: AnalysisState) -> dict:
    """Ask the resolution agent to explain the decision to the customer"""
    current_case_id = get_current_case_id()
    decision = state.get('decision_result')

    if decision is None:
        logger.warning(f"[RESOLUTION] No decision available for case {current_case_id}")
        return {
            'current_step': 'generate_resolution',
            'status': 'failed',
            'error_kind': ErrorKind.MISSING_DECISION,
            'error_message': 'No decision is available to build a resolution from'
        }

    delay = state.get('handoff_delay') or 0
    if delay > 0:
        await asyncio.sleep(delay)

    logger.info(f"[RESOLUTION] Generating resolution for case {current_case_id}: {decision.final_decision}")
    envelope = await invoke_agent(json.dumps(decision.to_resolution_payload()), AgentRole.RESOLUTION)

    if not envelope.success:
        logger.error(f"[RESOLUTION] Resolution agent failed for case {current_case_id}: {envelope.error}")
        return {
            'current_step': 'generate_resolution',
            'status': 'failed',
            'error_kind': ErrorKind.RESOLUTION_FAILED,
            'error_message': envelope.error or 'Resolution agent call failed'
        }

    resolution = extract_customer_resolution_result(envelope)
    if resolution is None:
        logger.error(f"[RESOLUTION] Resolution agent returned no usable resolution for case {current_case_id}")
        return {
            'current_step': 'generate_resolution',
            'status': 'failed',
            'error_kind': ErrorKind.RESOLUTION_FAILED,
            'error_message': 'Resolution agent returned no resolution'
        }

    logger.info(f"[RESOLUTION] Resolution ready for case {current_case_id}: {resolution.decision_type}")
    return {
        'current_step': 'generate_resolution',
        'status': 'completed',
        'resolution_result': resolution
    }


def check_resolution_outcome(state: AnalysisState) -> str:
    """Route after the resolution step"""
    return 'resolved' if state.get('resolution_result') is not None else 'failed'
