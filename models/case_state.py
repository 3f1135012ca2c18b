"""
Case State - everything one dispute session owns
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.analysis import DecisionSynthesisResult, SOPComplianceResult, SQLQueryResult
from models.conversation import ConversationResult
from models.resolution import CustomerResolutionResult
from models.transcript import Transcript

INTAKE_GREETING = (
    "Hello! I'm here to help you with your credit card dispute. "
    "Could you please tell me about the transaction you'd like to dispute?"
)


class Phase(str, Enum):
    CONVERSATION = 'conversation'
    SUMMARY = 'summary'
    ANALYSIS = 'analysis'
    RESOLUTION = 'resolution'


class ErrorKind(str, Enum):
    GATEWAY_FAILURE = 'gateway_failure'
    ANALYSIS_FAILED = 'analysis_failed'
    MISSING_DECISION = 'missing_decision'
    RESOLUTION_FAILED = 'resolution_failed'


class PhaseError(BaseModel):
    """A failure attached to the phase it happened in"""
    model_config = ConfigDict(frozen=True)

    phase: Phase
    kind: ErrorKind
    message: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CaseState:
    """
    State of a single dispute case

    Only CaseSession actions write to this object. The analysis progress
    fields are the one exception: the decorative progress schedule updates
    them and nothing else.
    """

    def __init__(self, case_id: str):
        self.case_id = case_id
        self.phase = Phase.CONVERSATION
        self.created_at = datetime.now(timezone.utc)

        self.intake_transcript = Transcript('intake')
        self.intake_transcript.append_agent_turn(INTAKE_GREETING)
        self.resolution_transcript = Transcript('resolution')

        self.conversation_result: Optional[ConversationResult] = None
        self.sql_result: Optional[SQLQueryResult] = None
        self.sop_result: Optional[SOPComplianceResult] = None
        self.decision_result: Optional[DecisionSynthesisResult] = None
        self.resolution_result: Optional[CustomerResolutionResult] = None

        # Edit buffer for the case summary; None when not editing
        self.summary_draft: Optional[str] = None

        self.progress_percent = 0
        self.progress_step = ''

        self.conversation_loading = False
        self.analysis_loading = False
        self.resolution_loading = False

        self.last_error: Optional[PhaseError] = None

    @property
    def is_editing(self) -> bool:
        return self.summary_draft is not None

    @property
    def status(self) -> str:
        if self.phase == Phase.RESOLUTION:
            return 'resolved'
        if self.last_error is not None:
            return 'attention_required'
        if self.conversation_loading or self.analysis_loading or self.resolution_loading:
            return 'running'
        return 'waiting_for_customer'

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view of the case; building it never changes the state"""
        def dump(result):
            return result.to_dict() if result is not None else None

        return {
            'case_id': self.case_id,
            'phase': self.phase.value,
            'status': self.status,
            'created_at': self.created_at.isoformat(),
            'intake_transcript': self.intake_transcript.to_list(),
            'resolution_transcript': self.resolution_transcript.to_list(),
            'conversation_result': dump(self.conversation_result),
            'sql_result': dump(self.sql_result),
            'sop_result': dump(self.sop_result),
            'decision_result': dump(self.decision_result),
            'resolution_result': dump(self.resolution_result),
            'summary_draft': self.summary_draft,
            'is_editing': self.is_editing,
            'analysis_progress': {
                'percent': self.progress_percent,
                'step': self.progress_step
            },
            'loading': {
                'conversation': self.conversation_loading,
                'analysis': self.analysis_loading,
                'resolution': self.resolution_loading
            },
            'last_error': self.last_error.model_dump(mode='json') if self.last_error else None
        }
