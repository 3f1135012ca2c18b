"""
Result Extractors - turn raw agent payloads into typed results

Every extractor either returns a fully validated result or None. A missing,
malformed or empty shape is never an error; it simply leaves the case state
untouched.
"""
import json
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import ValidationError

from models.agent_response import AgentResponse
from models.analysis import DecisionSynthesisResult, SOPComplianceResult, SQLQueryResult
from models.conversation import ConversationResult
from models.resolution import CustomerResolutionResult
from models.result_base import AgentResultModel
from utils.logging_config import get_logger

logger = get_logger('agents.extractors')

ResultT = TypeVar('ResultT', bound=AgentResultModel)


def coerce_payload(raw: Any) -> Optional[Dict[str, Any]]:
    """Accept a dict or a JSON object encoded as a string"""
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (str, bytes)):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return None
        return decoded if isinstance(decoded, dict) else None
    return None


def extract_result(model: Type[ResultT], raw: Any) -> Optional[ResultT]:
    """Validate ``raw`` as ``model``; None when the shape is absent or malformed"""
    payload = coerce_payload(raw)
    if not payload:
        return None
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.debug(f"[EXTRACT] {model.__name__} rejected: {e.error_count()} validation error(s)")
        return None


def _from_envelope(model: Type[ResultT], envelope: Optional[AgentResponse]) -> Optional[ResultT]:
    if envelope is None or not envelope.success:
        return None
    return extract_result(model, envelope.result)


def extract_conversation_result(envelope: AgentResponse) -> Optional[ConversationResult]:
    return _from_envelope(ConversationResult, envelope)


def extract_sql_query_result(envelope: AgentResponse) -> Optional[SQLQueryResult]:
    return _from_envelope(SQLQueryResult, envelope)


def extract_sop_compliance_result(envelope: AgentResponse) -> Optional[SOPComplianceResult]:
    return _from_envelope(SOPComplianceResult, envelope)


def extract_decision_synthesis_result(envelope: AgentResponse) -> Optional[DecisionSynthesisResult]:
    return _from_envelope(DecisionSynthesisResult, envelope)


def extract_customer_resolution_result(envelope: AgentResponse) -> Optional[CustomerResolutionResult]:
    return _from_envelope(CustomerResolutionResult, envelope)
