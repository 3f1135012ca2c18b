"""
Session Registry - live dispute cases held by the running process
"""
from typing import Dict, List, Optional

from utils.logging_config import get_logger
from workflows.case_session import CaseSession

logger = get_logger('services.session_registry')


class SessionRegistry:
    """
    Creates and looks up CaseSessions

    Sessions live in memory; their snapshots go to ``store`` when one is given.
    """

    def __init__(self, gateway, store=None, handoff_delay: Optional[float] = None):
        self.gateway = gateway
        self.store = store
        self.handoff_delay = handoff_delay
        self._sessions: Dict[str, CaseSession] = {}

    def create_session(self, case_id: Optional[str] = None) -> CaseSession:
        if case_id and case_id in self._sessions:
            raise ValueError(f"Case {case_id} already exists")

        session = CaseSession(
            self.gateway,
            case_id=case_id,
            store=self.store,
            handoff_delay=self.handoff_delay
        )
        self._sessions[session.case_id] = session
        logger.info(f"📋 [REGISTRY] Opened case {session.case_id}")
        return session

    def get_session(self, case_id: str) -> Optional[CaseSession]:
        return self._sessions.get(case_id)

    def list_sessions(self) -> List[CaseSession]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)
