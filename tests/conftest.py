"""Shared test infrastructure for the dispute assistant test suite.

Provides:
- FakeGateway / fake_gateway: scripted async agent gateway recording every call
- conversation_payload, sql_payload, sop_payload, decision_payload,
  resolution_payload: factories for raw agent result dicts
- orchestrator_payload: factory for a composite orchestrator result
- make_session: CaseSession factory wired to the fake gateway
- database_service: DatabaseService on an in-memory SQLite database
"""

import copy
from collections import defaultdict, deque

import pytest

from models.agent_response import AgentResponse, AgentRole
from services.database_service import DatabaseService
from services.mock_agent_responses import (
    MOCK_CONVERSATION_RESULT,
    MOCK_DECISION_RESULT,
    MOCK_RESOLUTION_RESULT,
    MOCK_SOP_RESULT,
    MOCK_SQL_RESULT,
)
from workflows.case_session import CaseSession


# ---------------------------------------------------------------------------
# Scripted gateway
# ---------------------------------------------------------------------------

class FakeGateway:
    """Async gateway answering from per-role queues.

    ``script(role, *responses)`` queues replies; an entry may be an
    AgentResponse or an exception instance to raise. Unscripted calls get a
    failure envelope. Every call is recorded in ``calls`` as (role, message).
    """

    def __init__(self):
        self.queues = defaultdict(deque)
        self.calls = []

    def script(self, role, *responses):
        self.queues[role].extend(responses)
        return self

    def calls_for(self, role):
        return [message for called_role, message in self.calls if called_role == role]

    async def invoke(self, message, role):
        self.calls.append((role, message))
        if not self.queues[role]:
            return AgentResponse.failure(f"no scripted reply for {role.value}")
        response = self.queues[role].popleft()
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_gateway():
    return FakeGateway()


# ---------------------------------------------------------------------------
# Payload factories
# ---------------------------------------------------------------------------

def _factory(base):
    def build(**overrides):
        payload = copy.deepcopy(base)
        payload.update(overrides)
        return payload
    return build


@pytest.fixture
def conversation_payload():
    return _factory(MOCK_CONVERSATION_RESULT)


@pytest.fixture
def sql_payload():
    return _factory(MOCK_SQL_RESULT)


@pytest.fixture
def sop_payload():
    return _factory(MOCK_SOP_RESULT)


@pytest.fixture
def decision_payload():
    return _factory(MOCK_DECISION_RESULT)


@pytest.fixture
def resolution_payload():
    return _factory(MOCK_RESOLUTION_RESULT)


@pytest.fixture
def orchestrator_payload(sql_payload, sop_payload, decision_payload):
    """Composite orchestrator result with one sub-result per bucket."""
    def build(final_output=None, sub_agent_results=None):
        if sub_agent_results is None:
            sub_agent_results = [
                {'agent_name': 'SQL Query Agent', 'status': 'completed', 'output': sql_payload()},
                {'agent_name': 'SOP Compliance Agent', 'status': 'completed', 'output': sop_payload()},
                {'agent_name': 'Decision Synthesis Agent', 'status': 'completed', 'output': decision_payload()},
            ]
        return {
            'final_output': final_output,
            'sub_agent_results': sub_agent_results,
            'summary': 'Orchestration finished',
            'workflow_completed': True,
        }
    return build


# ---------------------------------------------------------------------------
# Sessions and storage
# ---------------------------------------------------------------------------

@pytest.fixture
def make_session(fake_gateway):
    """CaseSession factory with no handoff delay and a fast progress schedule."""
    def build(**kwargs):
        kwargs.setdefault('handoff_delay', 0.0)
        kwargs.setdefault('progress_schedule', ())
        return CaseSession(fake_gateway, **kwargs)
    return build


@pytest.fixture
def database_service():
    return DatabaseService('sqlite://')


@pytest.fixture
def drive_to_summary(fake_gateway):
    """Coroutine that scripts one intake reply and advances a session to Summary."""
    async def drive(session, conversation):
        fake_gateway.script(AgentRole.INTAKE, AgentResponse.ok('Here is your summary.', conversation))
        await session.submit_user_turn("I was charged for an order that never arrived")
        assert session.advance_to_summary()
    return drive
