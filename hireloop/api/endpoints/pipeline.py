"""
Pipeline API endpoints

Handles the five-round assessment pipeline:
- Creating sessions
- Generating or attaching round questions
- Submitting round answers
- Session status
"""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from hireloop.api.dependencies import get_orchestrator
from hireloop.api.errors import to_http_exception
from hireloop.core.exceptions import HireLoopError
from hireloop.models.evaluation import RoundResult
from hireloop.models.question import QuestionItem

router = APIRouter()

# Fields that would leak answers to the candidate
HIDDEN_QUESTION_FIELDS = {"correct_index", "explanation", "rubric_hint"}


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class CreateSessionRequest(BaseModel):
    """Request model for starting a pipeline."""
    candidate_id: str


class QuestionsRequest(BaseModel):
    """Request model for attaching a prepared question set."""
    questions: list[QuestionItem] = Field(..., min_length=1)


class QuestionsResponse(BaseModel):
    """Question set as shown to the candidate."""
    session_id: str
    round_number: int
    questions: list[dict[str, Any]]


class SubmitAnswersRequest(BaseModel):
    """Request model for submitting a round."""
    answers: dict[str, Any] = Field(
        default_factory=dict,
        description="Answers keyed by question id: option index for MCQs, text otherwise"
    )


class SubmitAnswersResponse(BaseModel):
    """Response after a round is evaluated."""
    result: RoundResult
    status: dict[str, Any]


def _public_questions(items: list[QuestionItem]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", exclude=HIDDEN_QUESTION_FIELDS) for item in items]


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/sessions")
async def create_session(request: CreateSessionRequest) -> dict[str, Any]:
    """Create a pipeline session for a registered candidate."""
    orchestrator = get_orchestrator()
    try:
        session = await orchestrator.create_session(request.candidate_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e

    return orchestrator.get_status(session.session_id)


@router.get("/sessions/{session_id}")
async def get_status(session_id: str) -> dict[str, Any]:
    """Get the current status of a pipeline session."""
    try:
        return get_orchestrator().get_status(session_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e


@router.post("/sessions/{session_id}/rounds/{round_number}/questions", response_model=QuestionsResponse)
async def generate_questions(session_id: str, round_number: int) -> QuestionsResponse:
    """
    Generate the question set for the current round.

    Round 3 questions are generated with the deep-probe requirement once the
    candidate has passed the gatekeeper.
    """
    try:
        items = await get_orchestrator().generate_round_questions(session_id, round_number)
    except HireLoopError as e:
        raise to_http_exception(e) from e

    return QuestionsResponse(
        session_id=session_id,
        round_number=round_number,
        questions=_public_questions(items),
    )


@router.put("/sessions/{session_id}/rounds/{round_number}/questions", response_model=QuestionsResponse)
async def set_questions(
    session_id: str,
    round_number: int,
    request: QuestionsRequest,
) -> QuestionsResponse:
    """Attach a prepared question set to the current round."""
    try:
        items = await get_orchestrator().set_round_questions(
            session_id, round_number, request.questions
        )
    except HireLoopError as e:
        raise to_http_exception(e) from e

    return QuestionsResponse(
        session_id=session_id,
        round_number=round_number,
        questions=_public_questions(items),
    )


@router.post("/sessions/{session_id}/rounds/{round_number}/answers", response_model=SubmitAnswersResponse)
async def submit_answers(
    session_id: str,
    round_number: int,
    request: SubmitAnswersRequest,
) -> SubmitAnswersResponse:
    """Submit the answers for the current round and advance the pipeline."""
    orchestrator = get_orchestrator()
    try:
        result = await orchestrator.submit_round_answers(session_id, round_number, request.answers)
    except HireLoopError as e:
        raise to_http_exception(e) from e

    return SubmitAnswersResponse(result=result, status=orchestrator.get_status(session_id))
