"""
Orchestration Splitter - sorts orchestrator sub-agent outputs into typed buckets
"""
from typing import Any, List, NamedTuple, Optional

from pydantic import ValidationError

from agents.extractors import coerce_payload, extract_result
from models.agent_response import AgentRole, SubAgentResult
from models.analysis import DecisionSynthesisResult, SOPComplianceResult, SQLQueryResult
from utils.logging_config import get_logger

logger = get_logger('agents.orchestration_splitter')

# Name keywords checked in this order; the first bucket that matches wins.
# Kept for orchestrators that do not tag sub-results with agent_role.
BUCKET_KEYWORDS = (
    (AgentRole.LOOKUP, ('sql',)),
    (AgentRole.COMPLIANCE, ('sop', 'compliance')),
    (AgentRole.SYNTHESIS, ('decision', 'synthesis')),
)

BUCKET_MODELS = {
    AgentRole.LOOKUP: SQLQueryResult,
    AgentRole.COMPLIANCE: SOPComplianceResult,
    AgentRole.SYNTHESIS: DecisionSynthesisResult,
}


class SplitResult(NamedTuple):
    sql: Optional[SQLQueryResult] = None
    sop: Optional[SOPComplianceResult] = None
    decision: Optional[DecisionSynthesisResult] = None


def classify_sub_agent(sub_result: SubAgentResult) -> Optional[AgentRole]:
    """Pick the bucket for one sub-agent output, or None when it has no bucket"""
    if sub_result.agent_role:
        try:
            role = AgentRole(sub_result.agent_role.strip().lower())
        except ValueError:
            role = None
        if role in BUCKET_MODELS:
            return role

    name = (sub_result.agent_name or '').lower()
    for role, keywords in BUCKET_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return role
    return None


def _sub_agent_entries(raw_entries: Any) -> List[SubAgentResult]:
    if not isinstance(raw_entries, list):
        return []
    entries = []
    for raw_entry in raw_entries:
        try:
            entries.append(SubAgentResult.model_validate(raw_entry))
        except ValidationError:
            logger.debug(f"[SPLIT] Skipping malformed sub-agent entry: {raw_entry!r}")
    return entries


def split_orchestrator_result(raw: Any) -> SplitResult:
    """
    Split a composite orchestrator result into SQL, compliance and decision results

    Sub-results are visited in order and later valid entries overwrite earlier
    ones in the same bucket. A top-level ``final_output`` that validates as a
    decision is applied last, so it always replaces a sub-agent decision.
    """
    payload = coerce_payload(raw)
    if not payload:
        return SplitResult()

    buckets = {}
    for sub_result in _sub_agent_entries(payload.get('sub_agent_results')):
        role = classify_sub_agent(sub_result)
        if role is None:
            logger.debug(f"[SPLIT] Ignoring unmatched sub-agent '{sub_result.agent_name}'")
            continue

        extracted = extract_result(BUCKET_MODELS[role], sub_result.output)
        if extracted is None:
            logger.warning(f"[SPLIT] Sub-agent '{sub_result.agent_name}' returned no usable {role.value} result")
            continue
        buckets[role] = extracted

    final_decision = extract_result(DecisionSynthesisResult, payload.get('final_output'))
    if final_decision is not None:
        buckets[AgentRole.SYNTHESIS] = final_decision

    split = SplitResult(
        sql=buckets.get(AgentRole.LOOKUP),
        sop=buckets.get(AgentRole.COMPLIANCE),
        decision=buckets.get(AgentRole.SYNTHESIS)
    )
    logger.info(
        f"[SPLIT] sql={'yes' if split.sql else 'no'} "
        f"sop={'yes' if split.sop else 'no'} "
        f"decision={'yes' if split.decision else 'no'}"
    )
    return split
