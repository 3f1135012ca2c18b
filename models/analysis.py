"""
Analysis Models - outputs of the lookup, compliance and decision agents
"""
from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.result_base import AgentResultModel


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# Transaction lookup (SQL query agent)

class DisputedTransaction(_Frozen):
    transaction_id: str
    date: str
    amount: float
    merchant: str
    category: str
    status: str


class AccountHistory(_Frozen):
    account_age_days: int
    total_transactions: int
    average_monthly_spend: float
    previous_disputes: int


class SQLQueryResult(AgentResultModel):
    """Transaction records retrieved for the disputed charge"""
    defining_field: ClassVar[str] = 'data_summary'

    disputed_transaction: DisputedTransaction
    related_transactions: List[Any]
    account_history: AccountHistory
    queries_executed: List[Any]
    data_summary: str


# Policy compliance (SOP agent)

class ApplicablePolicy(_Frozen):
    policy_id: str
    policy_name: str
    description: str
    applies_because: str


class ComplianceRule(_Frozen):
    rule_id: str
    rule_description: str
    threshold: str
    current_case_status: str


class ApprovalCriteria(_Frozen):
    auto_approve_conditions: List[str]
    auto_deny_conditions: List[str]
    manual_review_conditions: List[str]


class SOPComplianceResult(AgentResultModel):
    """Policies and thresholds that apply to the case"""
    defining_field: ClassVar[str] = 'recommendation'

    applicable_policies: List[ApplicablePolicy]
    compliance_rules: List[ComplianceRule]
    approval_criteria: ApprovalCriteria
    policy_citations: List[str]
    recommendation: str
    confidence: float = Field(ge=0, le=1)


# Decision synthesis

class KeyFinding(_Frozen):
    finding: str
    impact: str
    weight: str


class PolicyCitation(_Frozen):
    policy_id: str
    policy_name: str
    relevance: str


class DecisionSynthesisResult(AgentResultModel):
    """Final decision weighed from transaction data and policy findings"""
    defining_field: ClassVar[str] = 'final_decision'

    final_decision: str
    decision_confidence: float = Field(ge=0, le=1)
    reasoning: str
    key_findings: List[KeyFinding]
    policy_citations: List[PolicyCitation]
    supporting_evidence: List[Any]
    risk_factors: List[str]
    recommended_action: str
    escalation_reason: Optional[str] = None

    def to_resolution_payload(self) -> dict:
        """Decision fields the resolution agent receives"""
        return {
            'decision': self.final_decision,
            'reasoning': self.reasoning,
            'policy_citations': [citation.model_dump(mode='json') for citation in self.policy_citations]
        }
