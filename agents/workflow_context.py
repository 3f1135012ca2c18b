"""
Workflow Context Manager - per-run data shared with the analysis graph nodes
"""
from typing import Optional
from contextvars import ContextVar

from models.agent_response import AgentResponse, AgentRole
from utils.logging_config import get_logger

logger = get_logger('agents.workflow_context')

_current_case_id: ContextVar[Optional[str]] = ContextVar('current_case_id', default=None)
_current_run_id: ContextVar[Optional[int]] = ContextVar('current_run_id', default=None)
_current_gateway: ContextVar[Optional[object]] = ContextVar('current_gateway', default=None)


class WorkflowContext:
    """Binds the case, analysis run and agent gateway for the nodes of one run"""

    def __init__(self, case_id: str, run_id: int, gateway=None):
        self.case_id = case_id
        self.run_id = run_id
        self.gateway = gateway

    def __enter__(self):
        self._tokens = (
            _current_case_id.set(self.case_id),
            _current_run_id.set(self.run_id),
            _current_gateway.set(self.gateway),
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        case_token, run_token, gateway_token = self._tokens
        _current_case_id.reset(case_token)
        _current_run_id.reset(run_token)
        _current_gateway.reset(gateway_token)


def get_current_case_id() -> Optional[str]:
    return _current_case_id.get()


def get_current_run_id() -> Optional[int]:
    return _current_run_id.get()


def get_current_gateway():
    """Gateway bound to this run, or the shared async gateway"""
    gateway = _current_gateway.get()
    if gateway is None:
        from services.service_factory import ServiceFactory
        gateway = ServiceFactory.get_async_agent_gateway()
    return gateway


async def invoke_agent(message: str, role: AgentRole, gateway=None) -> AgentResponse:
    """Call an agent, turning a raised exception into a failure envelope"""
    if gateway is None:
        gateway = get_current_gateway()
    try:
        return await gateway.invoke(message, role)
    except Exception as e:
        logger.error(f"[GATEWAY] {role.value} agent call raised for case {get_current_case_id()}: {e}")
        return AgentResponse.failure(str(e))
