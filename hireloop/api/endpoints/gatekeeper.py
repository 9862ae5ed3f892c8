"""
Gatekeeper API endpoint

Standalone project authenticity audit, usable outside an interview
session (e.g. when a candidate uploads projects).
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from hireloop.api.dependencies import get_gatekeeper
from hireloop.models.candidate import CandidateProfile, ProjectEvidence
from hireloop.models.evaluation import GatekeeperVerdict

router = APIRouter()


class AuditRequest(BaseModel):
    """Evidence to audit against a role."""
    target_role: str = "Candidate"
    skills: list[str] = Field(default_factory=list)
    projects: list[ProjectEvidence] = Field(default_factory=list)


@router.post("/audit", response_model=GatekeeperVerdict)
async def audit(request: AuditRequest) -> GatekeeperVerdict:
    """
    Audit project evidence against a target role.

    Never fails on oracle errors: the audit is bypassed and reported as such.
    """
    evidence = CandidateProfile(
        candidate_id="adhoc",
        target_role=request.target_role,
        skills=request.skills,
        projects=request.projects,
    )
    return await get_gatekeeper().audit(evidence, request.target_role)
