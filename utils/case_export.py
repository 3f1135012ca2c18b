"""
Plain-text case summary export
"""
from typing import Optional

from models.conversation import ConversationResult
from models.resolution import CustomerResolutionResult

EXPORT_FILENAME = 'dispute-summary.txt'

_HEADER = 'CREDIT CARD DISPUTE SUMMARY'


def build_case_summary_document(
    conversation: Optional[ConversationResult],
    resolution: Optional[CustomerResolutionResult]
) -> Optional[str]:
    """
    Build the downloadable case summary

    Returns None until both the case summary and the customer resolution
    exist. Labels and their order are stable; downstream tooling parses them.
    """
    if conversation is None or resolution is None:
        return None

    transaction = conversation.transaction_details
    contact = resolution.contact_info
    next_steps = '\n'.join(
        f"{step.step_number}. {step.action} ({step.timeline})" for step in resolution.next_steps
    )

    lines = [
        _HEADER,
        '=' * len(_HEADER),
        '',
        f"Case Summary: {conversation.case_summary}",
        '',
        'Transaction Details:',
        f"- Date: {transaction.date}",
        f"- Amount: ${transaction.amount:.2f}",
        f"- Merchant: {transaction.merchant}",
        f"- Description: {transaction.description}",
        '',
        f"Dispute Reason: {conversation.dispute_reason}",
        '',
        f"Decision: {resolution.decision_type.upper()}",
        resolution.decision_summary,
        '',
        resolution.detailed_explanation,
        '',
        'Next Steps:',
        next_steps,
        '',
        'Contact Information:',
        f"Phone: {contact.support_phone}",
        f"Email: {contact.support_email}",
        f"Hours: {contact.hours}",
    ]
    return '\n'.join(lines).strip()
