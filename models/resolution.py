"""
Resolution Model - customer-facing outcome of a dispute
"""
from typing import ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict

from models.result_base import AgentResultModel


class PolicyReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    policy_name: str
    customer_friendly_explanation: str


class NextStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    step_number: int
    action: str
    timeline: str


class AppealOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_appeal: bool
    appeal_deadline: str
    appeal_instructions: str


class ContactInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    support_phone: str
    support_email: str
    hours: str


class CustomerResolutionResult(AgentResultModel):
    """
    Represents the resolution explained to the customer
    """
    defining_field: ClassVar[str] = 'decision_summary'

    decision_summary: str
    detailed_explanation: str
    decision_type: str  # approved, denied, partial, escalated
    resolution_amount: Optional[float] = None
    policy_references: List[PolicyReference]
    next_steps: List[NextStep]
    appeal_options: AppealOptions
    contact_info: ContactInfo
    estimated_resolution_date: Optional[str] = None
