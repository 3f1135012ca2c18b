"""
Dispute Assistant Agents Package

This package contains the result extractors, the orchestration splitter and
the node functions of the analysis workflow graph.
"""

from .analysis_state import AnalysisState
from .workflow_context import WorkflowContext, invoke_agent
from .extractors import (
    extract_result,
    extract_conversation_result,
    extract_sql_query_result,
    extract_sop_compliance_result,
    extract_decision_synthesis_result,
    extract_customer_resolution_result
)
from .orchestration_splitter import SplitResult, split_orchestrator_result
from .orchestrator_runner import run_orchestrator_agent, check_analysis_outcome
from .resolution_generator import generate_resolution_agent, check_resolution_outcome
from .error_handler import handle_error_agent

__all__ = [
    'AnalysisState',
    'WorkflowContext',
    'invoke_agent',
    'extract_result',
    'extract_conversation_result',
    'extract_sql_query_result',
    'extract_sop_compliance_result',
    'extract_decision_synthesis_result',
    'extract_customer_resolution_result',
    'SplitResult',
    'split_orchestrator_result',
    'run_orchestrator_agent',
    'check_analysis_outcome',
    'generate_resolution_agent',
    'check_resolution_outcome',
    'handle_error_agent'
]
