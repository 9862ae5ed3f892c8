"""
Report API endpoints

Handles:
- Full candidate report retrieval
- Condensed report summary
"""

from fastapi import APIRouter
from pydantic import BaseModel

from hireloop.api.dependencies import get_orchestrator
from hireloop.api.errors import to_http_exception
from hireloop.core.exceptions import HireLoopError
from hireloop.models.report import CandidateReport

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class ReportSummaryResponse(BaseModel):
    """Condensed report response."""
    session_id: str
    headline_score: int
    verdict: str
    verdict_description: str
    screened_out: bool
    top_selling_point: str | None = None


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/{session_id}", response_model=CandidateReport)
async def get_report(session_id: str) -> CandidateReport:
    """
    Get the full candidate report.

    Available once the pipeline has completed or the candidate was screened out.
    """
    try:
        return await get_orchestrator().compose_report(session_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e


@router.get("/{session_id}/summary", response_model=ReportSummaryResponse)
async def get_report_summary(session_id: str) -> ReportSummaryResponse:
    """Get a condensed version of the report."""
    try:
        report = await get_orchestrator().compose_report(session_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e

    return ReportSummaryResponse(
        session_id=report.session_id,
        headline_score=report.headline_score,
        verdict=report.verdict.value,
        verdict_description=report.verdict.description,
        screened_out=report.screened_out,
        top_selling_point=report.selling_points[0] if report.selling_points else None,
    )
