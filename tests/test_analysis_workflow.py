"""Tests for the LangGraph analysis workflow and its nodes."""

import pytest

from agents import WorkflowContext, handle_error_agent
from agents.workflow_context import get_current_case_id, get_current_gateway, get_current_run_id
from agents.extractors import extract_result
from models.agent_response import AgentResponse, AgentRole
from models.analysis import DecisionSynthesisResult
from models.case_state import ErrorKind
from models.conversation import ConversationResult
from workflows.analysis_workflow import AnalysisWorkflow


@pytest.fixture
def workflow():
    return AnalysisWorkflow()


@pytest.fixture
def conversation(conversation_payload):
    return extract_result(ConversationResult, conversation_payload())


async def _run(workflow, conversation, gateway, **kwargs):
    return [item async for item in workflow.stream('case-1', 1, conversation, gateway=gateway, **kwargs)]


class TestAnalysisWorkflow:

    @pytest.mark.asyncio
    async def test_success_path(self, workflow, conversation, fake_gateway,
                                orchestrator_payload, resolution_payload):
        fake_gateway.script(AgentRole.ORCHESTRATOR, AgentResponse.ok('done', orchestrator_payload()))
        fake_gateway.script(AgentRole.RESOLUTION, AgentResponse.ok('ok', resolution_payload()))

        updates = await _run(workflow, conversation, fake_gateway)

        assert [node for node, _ in updates] == ['run_orchestrator', 'generate_resolution']
        orchestrator_update = updates[0][1]
        assert orchestrator_update['decision_result'].final_decision == 'approve'
        assert orchestrator_update['orchestrator_summary'] == 'Orchestration finished'
        assert updates[1][1]['resolution_result'].decision_type == 'approved'

    @pytest.mark.asyncio
    async def test_orchestrator_failure_routes_to_error(self, workflow, conversation, fake_gateway):
        fake_gateway.script(AgentRole.ORCHESTRATOR, AgentResponse.failure('timeout'))

        updates = await _run(workflow, conversation, fake_gateway)

        assert [node for node, _ in updates] == ['run_orchestrator', 'handle_error']
        assert updates[-1][1]['error_kind'] == ErrorKind.ANALYSIS_FAILED
        assert fake_gateway.calls_for(AgentRole.RESOLUTION) == []

    @pytest.mark.asyncio
    async def test_missing_decision_routes_to_error(self, workflow, conversation, fake_gateway):
        fake_gateway.script(AgentRole.ORCHESTRATOR, AgentResponse.ok('done', {'sub_agent_results': []}))

        updates = await _run(workflow, conversation, fake_gateway)

        assert [node for node, _ in updates] == ['run_orchestrator', 'handle_error']
        assert updates[-1][1]['error_kind'] == ErrorKind.MISSING_DECISION

    @pytest.mark.asyncio
    async def test_resolution_failure_routes_to_error(self, workflow, conversation, fake_gateway,
                                                      orchestrator_payload):
        fake_gateway.script(AgentRole.ORCHESTRATOR, AgentResponse.ok('done', orchestrator_payload()))
        fake_gateway.script(AgentRole.RESOLUTION, AgentResponse.failure('down'))

        updates = await _run(workflow, conversation, fake_gateway)

        assert [node for node, _ in updates] == ['run_orchestrator', 'generate_resolution', 'handle_error']
        assert updates[-1][1]['error_kind'] == ErrorKind.RESOLUTION_FAILED

    @pytest.mark.asyncio
    async def test_raising_orchestrator_routes_to_error(self, workflow, conversation, fake_gateway):
        fake_gateway.script(AgentRole.ORCHESTRATOR, ConnectionError('reset'))

        updates = await _run(workflow, conversation, fake_gateway)

        assert [node for node, _ in updates] == ['run_orchestrator', 'handle_error']
        assert updates[-1][1]['error_kind'] == ErrorKind.ANALYSIS_FAILED
        assert updates[-1][1]['error_message'] == 'reset'

    @pytest.mark.asyncio
    async def test_raising_resolution_call_routes_to_error(self, workflow, conversation, fake_gateway,
                                                           orchestrator_payload):
        fake_gateway.script(AgentRole.ORCHESTRATOR, AgentResponse.ok('done', orchestrator_payload()))
        fake_gateway.script(AgentRole.RESOLUTION, ConnectionError('reset'))

        updates = await _run(workflow, conversation, fake_gateway)

        assert [node for node, _ in updates] == ['run_orchestrator', 'generate_resolution', 'handle_error']
        assert updates[-1][1]['error_kind'] == ErrorKind.RESOLUTION_FAILED

    @pytest.mark.asyncio
    async def test_seeded_decision_survives_empty_orchestrator_output(self, workflow, conversation, fake_gateway,
                                                                      decision_payload, resolution_payload):
        decision = extract_result(DecisionSynthesisResult, decision_payload())
        fake_gateway.script(AgentRole.ORCHESTRATOR, AgentResponse.ok('done', {}))
        fake_gateway.script(AgentRole.RESOLUTION, AgentResponse.ok('ok', resolution_payload()))

        updates = await _run(workflow, conversation, fake_gateway, decision=decision)

        assert 'decision_result' not in updates[0][1]
        assert [node for node, _ in updates] == ['run_orchestrator', 'generate_resolution']


class TestWorkflowContext:

    def test_binds_and_restores(self, fake_gateway):
        with WorkflowContext('case-9', 3, fake_gateway):
            assert get_current_case_id() == 'case-9'
            assert get_current_run_id() == 3
            assert get_current_gateway() is fake_gateway
        assert get_current_case_id() is None
        assert get_current_run_id() is None

    def test_error_handler_defaults_to_missing_decision(self):
        update = handle_error_agent({'status': 'running'})

        assert update['status'] == 'failed'
        assert update['error_kind'] == ErrorKind.MISSING_DECISION

    def test_error_handler_keeps_tagged_error(self):
        update = handle_error_agent({'error_kind': ErrorKind.RESOLUTION_FAILED, 'error_message': 'bad'})

        assert update['error_kind'] == ErrorKind.RESOLUTION_FAILED
        assert update['error_message'] == 'bad'
