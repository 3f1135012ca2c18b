"""
Conversation Models - output of the customer conversation (intake) agent
"""
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from models.result_base import AgentResultModel


class TransactionDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    amount: float
    merchant: str
    description: str


class ConversationResult(AgentResultModel):
    """
    Case summary gathered by the intake agent

    The customer may rewrite ``case_summary`` during review; every other
    field stays exactly as the agent produced it.
    """
    defining_field: ClassVar[str] = 'case_summary'

    case_summary: str
    transaction_details: TransactionDetails
    dispute_reason: str
    supporting_context: str
    customer_sentiment: str
    next_steps: str

    def with_summary(self, case_summary: str) -> 'ConversationResult':
        return self.model_copy(update={'case_summary': case_summary})

    def to_case_payload(self) -> dict:
        """Fields the orchestrator receives when analysis starts"""
        return {
            'case_summary': self.case_summary,
            'transaction_details': self.transaction_details.model_dump(mode='json'),
            'dispute_reason': self.dispute_reason,
            'supporting_context': self.supporting_context
        }
