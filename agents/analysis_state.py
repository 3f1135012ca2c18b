"""
Shared analysis graph state definition for all agents
"""
from typing import Any, Dict, Optional, TypedDict

from models.analysis import DecisionSynthesisResult, SOPComplianceResult, SQLQueryResult
from models.case_state import ErrorKind
from models.resolution import CustomerResolutionResult


class AnalysisState(TypedDict, total=False):
    """State carried through one analysis run"""
    current_step: str
    status: str
    case_payload: Dict[str, Any]
    handoff_delay: float
    orchestrator_summary: Optional[str]
    sql_result: Optional[SQLQueryResult]
    sop_result: Optional[SOPComplianceResult]
    decision_result: Optional[DecisionSynthesisResult]
    resolution_result: Optional[CustomerResolutionResult]
    error_kind: Optional[ErrorKind]
    error_message: Optional[str]
