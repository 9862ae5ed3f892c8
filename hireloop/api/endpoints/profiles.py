"""
Profile API endpoints

Registers and reads candidate profiles used as interview snapshots.
"""

from fastapi import APIRouter

from hireloop.api.dependencies import get_profiles
from hireloop.api.errors import to_http_exception
from hireloop.core.exceptions import HireLoopError
from hireloop.models.candidate import CandidateProfile

router = APIRouter()


@router.post("", response_model=CandidateProfile)
async def register_profile(profile: CandidateProfile) -> CandidateProfile:
    """Register or replace a candidate profile."""
    return await get_profiles().add_profile(profile)


@router.get("/{candidate_id}", response_model=CandidateProfile)
async def get_profile(candidate_id: str) -> CandidateProfile:
    """Get a candidate profile."""
    try:
        return await get_profiles().get_profile(candidate_id)
    except HireLoopError as e:
        raise to_http_exception(e) from e
