"""
Conversational interview API endpoints

Handles:
- Starting a chat-style interview
- Answering the current question
- Transcript status and weighted analysis
"""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from hireloop.api.dependencies import get_conversation_interviewer
from hireloop.api.errors import to_http_exception
from hireloop.core.exceptions import HireLoopError
from hireloop.models.conversation import ConversationAnalysis

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class StartConversationRequest(BaseModel):
    """Request model for starting a conversation."""
    candidate_id: str


class StartConversationResponse(BaseModel):
    """Response with the first question."""
    session_id: str
    target_role: str
    question: str


class AnswerRequest(BaseModel):
    """Request model for answering the current question."""
    answer: str


class ConversationStatusResponse(BaseModel):
    """Response for conversation status."""
    session_id: str
    state: str
    question_count: int
    running_average: float | None
    current_question: str | None
    gatekeeper_verified: bool | None
    rejection_reason: str | None


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/sessions", response_model=StartConversationResponse)
async def start_conversation(request: StartConversationRequest) -> StartConversationResponse:
    """Start a conversational interview and return the first question."""
    try:
        session = await get_conversation_interviewer().start(request.candidate_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e

    return StartConversationResponse(
        session_id=session.session_id,
        target_role=session.target_role,
        question=session.current_question,
    )


@router.post("/sessions/{session_id}/answer")
async def answer(session_id: str, request: AnswerRequest) -> dict[str, Any]:
    """
    Answer the current question.

    Returns feedback on the answer and the next question, or the final
    outcome if the interview finished or the candidate was screened out.
    """
    try:
        return await get_conversation_interviewer().answer(session_id, request.answer)
    except HireLoopError as e:
        raise to_http_exception(e) from e


@router.get("/sessions/{session_id}", response_model=ConversationStatusResponse)
async def get_conversation(session_id: str) -> ConversationStatusResponse:
    """Get the status of a conversation."""
    try:
        session = get_conversation_interviewer().get_session(session_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e

    verdict = session.gatekeeper_verdict
    return ConversationStatusResponse(
        session_id=session.session_id,
        state=session.state.value,
        question_count=session.question_count,
        running_average=session.running_average,
        current_question=session.current_question,
        gatekeeper_verified=verdict.verified if verdict else None,
        rejection_reason=session.rejection_reason,
    )


@router.get("/sessions/{session_id}/analysis", response_model=ConversationAnalysis)
async def get_analysis(session_id: str) -> ConversationAnalysis:
    """Weighted analysis of the conversation transcript."""
    try:
        return await get_conversation_interviewer().analyze(session_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e
