"""
Agent Response Models - the normalized envelope every agent call returns
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AgentRole(str, Enum):
    """Logical agents the workflow routes to"""
    INTAKE = 'intake'
    LOOKUP = 'lookup'
    COMPLIANCE = 'compliance'
    SYNTHESIS = 'synthesis'
    RESOLUTION = 'resolution'
    ORCHESTRATOR = 'orchestrator'


class AgentReply(BaseModel):
    """Reply body of a successful agent call"""
    message: Optional[str] = None
    result: Optional[Any] = None


class AgentResponse(BaseModel):
    """
    Normalized envelope returned by the agent gateway

    Callers check ``success``; a failed call carries ``error`` and no reply.
    """
    success: bool
    response: Optional[AgentReply] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: Optional[str] = None, result: Any = None) -> 'AgentResponse':
        return cls(success=True, response=AgentReply(message=message, result=result))

    @classmethod
    def failure(cls, error: str) -> 'AgentResponse':
        return cls(success=False, error=error)

    @property
    def message(self) -> Optional[str]:
        if not self.success or self.response is None:
            return None
        return self.response.message

    @property
    def result(self) -> Any:
        if not self.success or self.response is None:
            return None
        return self.response.result


class SubAgentResult(BaseModel):
    """One sub-agent output inside an orchestrator response"""
    agent_name: str = ''
    status: Optional[str] = None
    output: Any = None
    # Explicit routing tag; when absent or unknown the splitter falls back to name matching
    agent_role: Optional[str] = None


class OrchestratorResult(BaseModel):
    """Composite result of the dispute orchestrator agent"""
    final_output: Any = None
    sub_agent_results: List[SubAgentResult] = Field(default_factory=list)
    summary: Optional[str] = None
    workflow_completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')
