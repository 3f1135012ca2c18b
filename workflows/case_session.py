"""
Case Session - the phase state machine for one dispute case
"""
import os
import uuid
from typing import Any, Dict, Optional

from agents import (
    WorkflowContext,
    extract_conversation_result,
    generate_resolution_agent,
    handle_error_agent,
    invoke_agent
)
from models.agent_response import AgentResponse, AgentRole
from models.case_state import CaseState, ErrorKind, Phase, PhaseError
from utils.case_export import build_case_summary_document
from utils.logging_config import get_logger
from workflows.analysis_progress import PROGRESS_SCHEDULE, AnalysisProgress
from workflows.analysis_workflow import AnalysisWorkflow

logger = get_logger('workflows.case_session')

ERROR_FALLBACK_MESSAGE = "I apologize, but I encountered an error. Could you please try again?"
INTAKE_FALLBACK_MESSAGE = (
    "Thank you for that information. "
    "Is there anything else you'd like to add about this dispute?"
)
RESOLUTION_FALLBACK_MESSAGE = "I'm here to help answer any questions about your dispute decision."


class CaseSession:
    """
    Drives one dispute case through conversation, summary, analysis and resolution

    Every user action is a method that returns True when it was applied and
    False when its precondition did not hold; a refused action never changes
    the case. All case data lives in ``self.state`` and is only written here.
    """

    def __init__(
        self,
        gateway,
        case_id: Optional[str] = None,
        store=None,
        handoff_delay: Optional[float] = None,
        analysis_workflow: Optional[AnalysisWorkflow] = None,
        progress_schedule=PROGRESS_SCHEDULE
    ):
        self.case_id = case_id or uuid.uuid4().hex[:12]
        self.gateway = gateway
        self.store = store
        if handoff_delay is None:
            handoff_delay = float(os.getenv('RESOLUTION_HANDOFF_DELAY', '1.0'))
        self.handoff_delay = handoff_delay
        self.analysis_workflow = analysis_workflow or AnalysisWorkflow()

        self.state = CaseState(self.case_id)
        self.progress = AnalysisProgress(self.state, progress_schedule)

        # Sequence numbers used to drop responses to superseded requests
        self._intake_seq = 0
        self._pending_intake = 0
        self._analysis_run = 0
        self._started_run = 0

        self._persist()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def snapshot(self) -> Dict[str, Any]:
        return self.state.to_dict()

    # ------------------------------------------------------------------
    # Phase 1: conversation
    # ------------------------------------------------------------------

    async def submit_user_turn(self, text: str) -> bool:
        if self.state.phase != Phase.CONVERSATION or not text or not text.strip():
            return False

        self._intake_seq += 1
        seq = self._intake_seq
        self.state.intake_transcript.append_user_turn(text)
        self.state.last_error = None

        self._pending_intake += 1
        self.state.conversation_loading = True
        try:
            envelope = await self._invoke(text, AgentRole.INTAKE)
        finally:
            self._pending_intake -= 1
            self.state.conversation_loading = self._pending_intake > 0

        if envelope.success:
            self.state.intake_transcript.append_agent_turn(envelope.message or INTAKE_FALLBACK_MESSAGE)
            result = extract_conversation_result(envelope)
            if result is not None:
                if seq == self._intake_seq and self.state.phase == Phase.CONVERSATION:
                    self.state.conversation_result = result
                    logger.info(f"Case {self.case_id}: case summary captured")
                else:
                    logger.warning(f"Case {self.case_id}: discarding case summary from superseded turn {seq}")
        else:
            self.state.intake_transcript.append_agent_turn(ERROR_FALLBACK_MESSAGE)
            self._record_error(ErrorKind.GATEWAY_FAILURE, envelope.error)

        self._persist()
        return True

    def advance_to_summary(self) -> bool:
        if self.state.phase != Phase.CONVERSATION or self.state.conversation_result is None:
            return False
        self._transition(Phase.SUMMARY)
        return True

    # ------------------------------------------------------------------
    # Phase 2: summary review
    # ------------------------------------------------------------------

    def begin_edit(self) -> bool:
        if self.state.phase != Phase.SUMMARY or self.state.conversation_result is None:
            return False
        self.state.summary_draft = self.state.conversation_result.case_summary
        return True

    def edit_summary(self, text: str) -> bool:
        if self.state.phase != Phase.SUMMARY or self.state.conversation_result is None:
            return False
        self.state.summary_draft = text
        return True

    def save_summary(self) -> bool:
        draft = self.state.summary_draft
        if self.state.phase != Phase.SUMMARY or draft is None or not draft.strip():
            return False
        self.state.conversation_result = self.state.conversation_result.with_summary(draft)
        self.state.summary_draft = None
        logger.info(f"Case {self.case_id}: case summary edited by customer")
        self._persist()
        return True

    def cancel_edit(self) -> bool:
        if self.state.phase != Phase.SUMMARY or not self.state.is_editing:
            return False
        self.state.summary_draft = None
        return True

    def return_to_conversation(self) -> bool:
        if self.state.phase != Phase.SUMMARY:
            return False
        self.state.summary_draft = None
        self._transition(Phase.CONVERSATION)
        return True

    # ------------------------------------------------------------------
    # Phase 3: analysis
    # ------------------------------------------------------------------

    @property
    def analysis_in_flight(self) -> bool:
        return self.state.analysis_loading or self.state.resolution_loading

    def can_submit_for_analysis(self) -> bool:
        if self.state.conversation_result is None:
            return False
        if self.state.phase == Phase.SUMMARY:
            return True
        # Re-trigger after a failed run
        return self.state.phase == Phase.ANALYSIS and not self.analysis_in_flight

    def begin_analysis(self) -> bool:
        """Claim the next analysis run; run_analysis() then carries it out"""
        if not self.can_submit_for_analysis():
            return False

        self._analysis_run += 1
        self.state.summary_draft = None
        self.state.last_error = None
        self.state.analysis_loading = True
        self._transition(Phase.ANALYSIS)
        return True

    async def run_analysis(self) -> bool:
        run_id = self._analysis_run
        if self.state.phase != Phase.ANALYSIS or not self.state.analysis_loading or run_id == self._started_run:
            return False
        self._started_run = run_id
        self.progress.start()

        try:
            async for node_name, update in self.analysis_workflow.stream(
                self.case_id,
                run_id,
                self.state.conversation_result,
                gateway=self.gateway,
                handoff_delay=self.handoff_delay,
                decision=self.state.decision_result
            ):
                self._apply_analysis_update(node_name, update)
        except Exception as e:
            logger.error(f"Case {self.case_id}: analysis run {run_id} crashed: {e}")
            if self.state.resolution_loading:
                self._record_error(ErrorKind.RESOLUTION_FAILED, str(e))
            else:
                self.progress.fail()
                self._record_error(ErrorKind.ANALYSIS_FAILED, str(e))
        finally:
            self.progress.cancel()
            self.state.analysis_loading = False
            self.state.resolution_loading = False
            self._persist()
        return True

    async def submit_for_analysis(self) -> bool:
        if not self.begin_analysis():
            return False
        return await self.run_analysis()

    async def generate_resolution(self) -> bool:
        """Build the customer resolution from the current decision"""
        if self.state.phase != Phase.ANALYSIS or self.analysis_in_flight:
            return False
        if self.state.decision_result is None:
            self._record_error(
                ErrorKind.MISSING_DECISION,
                'No decision is available to build a resolution from'
            )
            self._persist()
            return False

        self.state.last_error = None
        self.state.resolution_loading = True
        try:
            with WorkflowContext(self.case_id, self._analysis_run, self.gateway):
                update = await generate_resolution_agent({'decision_result': self.state.decision_result})
                self._apply_analysis_update('generate_resolution', update)
                if update.get('status') == 'failed':
                    self._apply_analysis_update('handle_error', handle_error_agent(update))
        finally:
            self.state.resolution_loading = False
            self._persist()
        return self.state.phase == Phase.RESOLUTION

    def _apply_analysis_update(self, node_name: str, update: Dict[str, Any]) -> None:
        if node_name == 'run_orchestrator':
            if update.get('status') == 'failed':
                self.progress.fail()
                return
            for field in ('sql_result', 'sop_result', 'decision_result'):
                if update.get(field) is not None:
                    setattr(self.state, field, update[field])
            self.progress.complete()
            if self.state.decision_result is not None:
                self.state.analysis_loading = False
                self.state.resolution_loading = True

        elif node_name == 'generate_resolution':
            resolution = update.get('resolution_result')
            if resolution is not None:
                self.state.resolution_result = resolution
                self.state.resolution_loading = False
                self._transition(Phase.RESOLUTION)

        elif node_name == 'handle_error':
            self._record_error(update.get('error_kind'), update.get('error_message'))

    # ------------------------------------------------------------------
    # Phase 4: resolution Q&A
    # ------------------------------------------------------------------

    async def ask_question(self, text: str) -> bool:
        if self.state.phase != Phase.RESOLUTION or not text or not text.strip():
            return False

        self.state.resolution_transcript.append_user_turn(text)
        self.state.last_error = None
        self.state.resolution_loading = True
        try:
            envelope = await self._invoke(text, AgentRole.RESOLUTION)
        finally:
            self.state.resolution_loading = False

        if envelope.success:
            self.state.resolution_transcript.append_agent_turn(envelope.message or RESOLUTION_FALLBACK_MESSAGE)
        else:
            self.state.resolution_transcript.append_agent_turn(ERROR_FALLBACK_MESSAGE)
            self._record_error(ErrorKind.GATEWAY_FAILURE, envelope.error)

        self._persist()
        return True

    def export_summary(self) -> Optional[str]:
        return build_case_summary_document(self.state.conversation_result, self.state.resolution_result)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _invoke(self, payload: str, role: AgentRole) -> AgentResponse:
        with WorkflowContext(self.case_id, self._analysis_run, self.gateway):
            return await invoke_agent(payload, role)

    def _transition(self, phase: Phase) -> None:
        previous = self.state.phase
        self.state.phase = phase
        logger.info(f"Case {self.case_id}: {previous.value} -> {phase.value}")
        self._persist()

    def _record_error(self, kind: Optional[ErrorKind], message: Optional[str]) -> None:
        kind = kind or ErrorKind.ANALYSIS_FAILED
        self.state.last_error = PhaseError(
            phase=self.state.phase,
            kind=kind,
            message=message or kind.value.replace('_', ' ')
        )
        logger.warning(f"Case {self.case_id}: {kind.value} during {self.state.phase.value}: {message}")

    def _persist(self) -> None:
        if self.store is None:
            return
        if not self.store.save_case_snapshot(self.case_id, self.snapshot()):
            logger.warning(f"Case {self.case_id}: snapshot was not persisted")
