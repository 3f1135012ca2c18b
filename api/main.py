"""
FastAPI Application for the Dispute Assistant
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from dotenv import load_dotenv

from services.service_factory import ServiceFactory
from services.session_registry import SessionRegistry
from utils.case_export import EXPORT_FILENAME
from utils.logging_config import init_logging, get_logger
from workflows.case_session import CaseSession

# Load environment variables
load_dotenv()

# Initialize centralized logging
init_logging()
logger = get_logger('api.main')

app = FastAPI(
    title="Dispute Assistant API",
    description="API for guiding customers through credit card disputes",
    version="1.0.0"
)


# Pydantic models
class CreateCaseRequest(BaseModel):
    case_id: Optional[str] = None


class MessageRequest(BaseModel):
    text: str


class SummaryEditRequest(BaseModel):
    text: str


def get_registry() -> SessionRegistry:
    return ServiceFactory.get_session_registry()


def _get_session(registry: SessionRegistry, case_id: str) -> CaseSession:
    session = registry.get_session(case_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Case {case_id} not found")
    return session


def _applied(session: CaseSession, applied: bool, action: str):
    if not applied:
        logger.warning(f"⚠️ [API] {action} refused for case {session.case_id} in phase {session.phase.value}")
        raise HTTPException(
            status_code=400,
            detail=f"Cannot {action} while the case is in the {session.phase.value} phase"
        )
    return session.snapshot()


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"message": "Dispute Assistant API", "status": "healthy"}


@app.get("/health")
async def health_check(registry: SessionRegistry = Depends(get_registry)):
    """Detailed health check"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "database": "connected" if registry.store is not None else "disabled",
            "workflow": "ready"
        },
        "open_cases": len(registry)
    }


@app.post("/cases", status_code=201)
async def create_case(request: Optional[CreateCaseRequest] = None, registry: SessionRegistry = Depends(get_registry)):
    """Open a new dispute case"""
    try:
        session = registry.create_session(request.case_id if request else None)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    logger.info(f"🚀 [API] Case {session.case_id} opened")
    return session.snapshot()


@app.get("/cases")
async def list_cases(status: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    """List the open cases, or the stored cases with the given status"""
    if status is None:
        cases = [
            {"case_id": session.case_id, "phase": session.phase.value, "status": session.state.status}
            for session in registry.list_sessions()
        ]
    else:
        if registry.store is None:
            raise HTTPException(status_code=404, detail="Case persistence is disabled")
        cases = [
            {"case_id": record["case_id"], "phase": record["phase"], "status": record["status"]}
            for record in registry.store.list_cases(status=status)
        ]
    return {"cases": cases, "count": len(cases)}


@app.get("/cases/{case_id}")
async def get_case(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Current snapshot of a case"""
    return _get_session(registry, case_id).snapshot()


@app.get("/cases/{case_id}/history")
async def get_case_history(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Last snapshot persisted for a case"""
    if registry.store is None:
        raise HTTPException(status_code=404, detail="Case persistence is disabled")
    record = registry.store.get_case_snapshot(case_id)
    if not record:
        raise HTTPException(status_code=404, detail=f"No stored snapshot for case {case_id}")
    return record


@app.post("/cases/{case_id}/messages")
async def send_message(case_id: str, request: MessageRequest, registry: SessionRegistry = Depends(get_registry)):
    """Send a customer turn to the intake agent"""
    session = _get_session(registry, case_id)
    return _applied(session, await session.submit_user_turn(request.text), "send a message")


@app.post("/cases/{case_id}/summary/advance")
async def advance_to_summary(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = _get_session(registry, case_id)
    return _applied(session, session.advance_to_summary(), "review the summary")


@app.post("/cases/{case_id}/summary/edit")
async def edit_summary(case_id: str, request: SummaryEditRequest, registry: SessionRegistry = Depends(get_registry)):
    session = _get_session(registry, case_id)
    return _applied(session, session.edit_summary(request.text), "edit the summary")


@app.post("/cases/{case_id}/summary/save")
async def save_summary(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = _get_session(registry, case_id)
    return _applied(session, session.save_summary(), "save the summary")


@app.post("/cases/{case_id}/summary/cancel")
async def cancel_summary_edit(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = _get_session(registry, case_id)
    return _applied(session, session.cancel_edit(), "cancel the edit")


@app.post("/cases/{case_id}/conversation/return")
async def return_to_conversation(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    session = _get_session(registry, case_id)
    return _applied(session, session.return_to_conversation(), "return to the conversation")


@app.post("/cases/{case_id}/analysis", status_code=202)
async def submit_for_analysis(
    case_id: str,
    background_tasks: BackgroundTasks,
    registry: SessionRegistry = Depends(get_registry)
):
    """Start the dispute analysis; poll GET /cases/{case_id} for progress"""
    session = _get_session(registry, case_id)
    _applied(session, session.begin_analysis(), "submit for analysis")

    background_tasks.add_task(session.run_analysis)
    logger.info(f"🔍 [API] Analysis scheduled for case {case_id}")
    return {"case_id": case_id, "status": "accepted", "message": "Analysis started"}


@app.post("/cases/{case_id}/resolution")
async def generate_resolution(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Retry building the customer resolution from the current decision"""
    session = _get_session(registry, case_id)
    return _applied(session, await session.generate_resolution(), "generate the resolution")


@app.post("/cases/{case_id}/questions")
async def ask_question(case_id: str, request: MessageRequest, registry: SessionRegistry = Depends(get_registry)):
    """Ask the resolution agent a follow-up question"""
    session = _get_session(registry, case_id)
    return _applied(session, await session.ask_question(request.text), "ask a question")


@app.get("/cases/{case_id}/export", response_class=PlainTextResponse)
async def export_case(case_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Download the plain-text case summary"""
    session = _get_session(registry, case_id)
    document = session.export_summary()
    if document is None:
        raise HTTPException(status_code=400, detail="The case has no resolution to export yet")
    return PlainTextResponse(
        document,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'}
    )
