"""Tests for the typed result extractors."""

import json

import pytest

from agents.extractors import (
    coerce_payload,
    extract_conversation_result,
    extract_customer_resolution_result,
    extract_decision_synthesis_result,
    extract_result,
    extract_sop_compliance_result,
    extract_sql_query_result,
)
from models.agent_response import AgentResponse
from models.analysis import DecisionSynthesisResult
from models.conversation import ConversationResult


class TestCoercePayload:

    def test_dict_passes_through(self):
        payload = {'a': 1}
        assert coerce_payload(payload) is payload

    def test_json_object_string_is_decoded(self):
        assert coerce_payload('{"a": 1}') == {'a': 1}

    @pytest.mark.parametrize('raw', ['not json', '[1, 2]', '"text"', 42, None, ['a']])
    def test_anything_else_is_absent(self, raw):
        assert coerce_payload(raw) is None


class TestConversationExtraction:

    def test_complete_result_is_extracted(self, conversation_payload):
        result = extract_conversation_result(AgentResponse.ok('done', conversation_payload()))

        assert isinstance(result, ConversationResult)
        assert result.transaction_details.merchant == 'Acme Store'
        assert result.transaction_details.amount == 125.50

    def test_result_encoded_as_json_string_is_extracted(self, conversation_payload):
        envelope = AgentResponse.ok('done', json.dumps(conversation_payload()))
        assert extract_conversation_result(envelope) is not None

    @pytest.mark.parametrize('summary', ['', '   ', None])
    def test_empty_case_summary_means_absent(self, conversation_payload, summary):
        envelope = AgentResponse.ok('done', conversation_payload(case_summary=summary))
        assert extract_conversation_result(envelope) is None

    def test_missing_required_field_means_absent(self, conversation_payload):
        payload = conversation_payload()
        del payload['transaction_details']
        assert extract_conversation_result(AgentResponse.ok('done', payload)) is None

    def test_wrong_field_type_means_absent(self, conversation_payload):
        payload = conversation_payload()
        payload['transaction_details']['amount'] = 'a lot'
        assert extract_conversation_result(AgentResponse.ok('done', payload)) is None

    def test_unknown_fields_are_ignored(self, conversation_payload):
        payload = conversation_payload(internal_trace='xyz')
        assert extract_conversation_result(AgentResponse.ok('done', payload)) is not None

    def test_failed_envelope_yields_nothing(self):
        assert extract_conversation_result(AgentResponse.failure('timeout')) is None

    def test_message_without_result_yields_nothing(self):
        assert extract_conversation_result(AgentResponse.ok('Tell me more')) is None

    def test_result_is_immutable(self, conversation_payload):
        result = extract_conversation_result(AgentResponse.ok('done', conversation_payload()))
        with pytest.raises(Exception):
            result.case_summary = 'changed'


class TestAnalysisExtraction:

    def test_sql_result(self, sql_payload):
        result = extract_sql_query_result(AgentResponse.ok(None, sql_payload()))
        assert result.disputed_transaction.transaction_id == 'TXN-20240115-0042'

    def test_sql_result_without_data_summary_is_absent(self, sql_payload):
        assert extract_sql_query_result(AgentResponse.ok(None, sql_payload(data_summary=''))) is None

    def test_sop_result(self, sop_payload):
        result = extract_sop_compliance_result(AgentResponse.ok(None, sop_payload()))
        assert result.recommendation == 'approve'

    def test_sop_confidence_out_of_range_is_absent(self, sop_payload):
        assert extract_sop_compliance_result(AgentResponse.ok(None, sop_payload(confidence=1.5))) is None

    def test_decision_result(self, decision_payload):
        result = extract_decision_synthesis_result(AgentResponse.ok(None, decision_payload()))
        assert result.final_decision == 'approve'
        assert result.escalation_reason is None

    def test_decision_resolution_payload(self, decision_payload):
        result = extract_result(DecisionSynthesisResult, decision_payload())
        payload = result.to_resolution_payload()

        assert set(payload) == {'decision', 'reasoning', 'policy_citations'}
        assert payload['policy_citations'][0]['policy_id'] == 'SOP-4.2'

    def test_resolution_result(self, resolution_payload):
        result = extract_customer_resolution_result(AgentResponse.ok(None, resolution_payload()))
        assert result.decision_type == 'approved'
        assert [step.step_number for step in result.next_steps] == [1, 2]

    def test_resolution_without_decision_summary_is_absent(self, resolution_payload):
        envelope = AgentResponse.ok(None, resolution_payload(decision_summary=''))
        assert extract_customer_resolution_result(envelope) is None

    def test_resolution_amount_is_optional(self, resolution_payload):
        payload = resolution_payload()
        del payload['resolution_amount']
        result = extract_customer_resolution_result(AgentResponse.ok(None, payload))
        assert result.resolution_amount is None
