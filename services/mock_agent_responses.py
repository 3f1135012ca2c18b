"""
Canned agent replies used when no agent API is configured
"""
from typing import Any, Dict

from models.agent_response import AgentRole, OrchestratorResult, SubAgentResult

MOCK_CONVERSATION_RESULT: Dict[str, Any] = {
    'case_summary': (
        'Customer reports a charge of $125.50 from Acme Store on 2024-01-15 '
        'for an order that never arrived.'
    ),
    'transaction_details': {
        'date': '2024-01-15',
        'amount': 125.50,
        'merchant': 'Acme Store',
        'description': 'Online order #A-88213'
    },
    'dispute_reason': 'Merchandise not received',
    'supporting_context': 'Merchant has not responded to two emails over three weeks.',
    'customer_sentiment': 'frustrated',
    'next_steps': 'Review transaction records and merchant history'
}

MOCK_SQL_RESULT: Dict[str, Any] = {
    'disputed_transaction': {
        'transaction_id': 'TXN-20240115-0042',
        'date': '2024-01-15',
        'amount': 125.50,
        'merchant': 'Acme Store',
        'category': 'retail',
        'status': 'posted'
    },
    'related_transactions': [],
    'account_history': {
        'account_age_days': 1150,
        'total_transactions': 842,
        'average_monthly_spend': 1320.75,
        'previous_disputes': 1
    },
    'queries_executed': ["SELECT * FROM transactions WHERE merchant = 'Acme Store'"],
    'data_summary': 'Transaction verified; long account history in good standing with one prior dispute.'
}

MOCK_SOP_RESULT: Dict[str, Any] = {
    'applicable_policies': [
        {
            'policy_id': 'SOP-4.2',
            'policy_name': 'Merchandise Not Received',
            'description': 'Disputes for goods that were paid for but never delivered.',
            'applies_because': 'Customer states the order never arrived.'
        }
    ],
    'compliance_rules': [
        {
            'rule_id': 'R-120',
            'rule_description': 'Dispute filed within 120 days of the transaction',
            'threshold': '120 days',
            'current_case_status': 'met'
        }
    ],
    'approval_criteria': {
        'auto_approve_conditions': ['Amount under $250 with merchant contact attempted'],
        'auto_deny_conditions': ['Filed after 120 days'],
        'manual_review_conditions': ['More than three disputes in twelve months']
    },
    'policy_citations': ['SOP-4.2'],
    'recommendation': 'approve',
    'confidence': 0.9
}

MOCK_DECISION_RESULT: Dict[str, Any] = {
    'final_decision': 'approve',
    'decision_confidence': 0.88,
    'reasoning': 'All merchandise-not-received criteria are met and the account is in good standing.',
    'key_findings': [
        {
            'finding': 'Merchant unresponsive for three weeks',
            'impact': 'supports approval',
            'weight': 'high'
        }
    ],
    'policy_citations': [
        {
            'policy_id': 'SOP-4.2',
            'policy_name': 'Merchandise Not Received',
            'relevance': 'primary'
        }
    ],
    'supporting_evidence': ['Customer emails to merchant'],
    'risk_factors': [],
    'recommended_action': 'Issue provisional credit and open a chargeback',
    'escalation_reason': None
}

MOCK_RESOLUTION_RESULT: Dict[str, Any] = {
    'decision_summary': 'Your dispute for $125.50 with Acme Store has been approved.',
    'detailed_explanation': (
        'We reviewed your transaction and account history and confirmed that the '
        'merchandise was not delivered. A credit will be applied to your account.'
    ),
    'decision_type': 'approved',
    'resolution_amount': 125.50,
    'policy_references': [
        {
            'policy_name': 'Merchandise Not Received',
            'customer_friendly_explanation': 'You are protected when an order you paid for never arrives.'
        }
    ],
    'next_steps': [
        {'step_number': 1, 'action': 'Provisional credit applied to your account', 'timeline': '1-2 business days'},
        {'step_number': 2, 'action': 'Merchant notified of the chargeback', 'timeline': '5-7 business days'}
    ],
    'appeal_options': {
        'can_appeal': False,
        'appeal_deadline': '',
        'appeal_instructions': 'Not applicable for approved disputes'
    },
    'contact_info': {
        'support_phone': '1-800-555-0199',
        'support_email': 'disputes@examplebank.com',
        'hours': 'Mon-Fri 8am-8pm ET'
    },
    'estimated_resolution_date': '2024-02-20'
}


def get_mock_response(message: str, role: AgentRole) -> Dict[str, Any]:
    """Raw response body in the shape the agent API returns"""
    if role == AgentRole.INTAKE:
        return {
            'response': {
                'message': (
                    "Thanks, I have what I need. Here is a summary of your dispute. "
                    "Please review it before we continue."
                ),
                'result': MOCK_CONVERSATION_RESULT
            }
        }

    if role == AgentRole.ORCHESTRATOR:
        return {
            'response': {
                'message': 'Dispute analysis complete.',
                'result': OrchestratorResult(
                    final_output=MOCK_DECISION_RESULT,
                    sub_agent_results=[
                        SubAgentResult(agent_name='SQL Query Agent', status='completed', output=MOCK_SQL_RESULT),
                        SubAgentResult(agent_name='SOP Compliance Agent', status='completed', output=MOCK_SOP_RESULT),
                        SubAgentResult(agent_name='Decision Synthesis Agent', status='completed', output=MOCK_DECISION_RESULT)
                    ],
                    summary='All sub-agents completed; recommending approval.',
                    workflow_completed=True
                ).to_dict()
            }
        }

    if role == AgentRole.RESOLUTION:
        if message.lstrip().startswith('{'):
            return {
                'response': {
                    'message': MOCK_RESOLUTION_RESULT['decision_summary'],
                    'result': MOCK_RESOLUTION_RESULT
                }
            }
        return {
            'response': {
                'message': (
                    'Your provisional credit should appear within 1-2 business days. '
                    'Is there anything else I can help with?'
                )
            }
        }

    return {'response': {'message': f"The {role.value} agent has no canned reply."}}
