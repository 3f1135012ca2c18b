"""
Error Handler Agent - tags analysis failures so they reach the case
"""
from agents.analysis_state import AnalysisState
from agents.workflow_context import get_current_case_id, get_current_run_id
from models.case_state import ErrorKind
from utils.logging_config import get_logger

logger = get_logger('agents.error_handler')


def handle_error_agent(state: AnalysisState) -> dict:
    """Make sure every failed run ends with a tagged error"""
    current_case_id = get_current_case_id()
    current_run_id = get_current_run_id()

    error_kind = state.get('error_kind')
    error_message = state.get('error_message')

    if error_kind is None:
        # The orchestrator answered but nothing in its output was a decision
        error_kind = ErrorKind.MISSING_DECISION
        error_message = 'The analysis finished without reaching a decision'

    logger.error(
        f"[ANALYSIS] Run {current_run_id} for case {current_case_id} failed "
        f"({error_kind.value}): {error_message}"
    )
    return {
        'current_step': 'error',
        'status': 'failed',
        'error_kind': error_kind,
        'error_message': error_message
    }
