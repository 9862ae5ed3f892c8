"""
Candidate profile repository.

Profiles are owned outside the interview engine; the engine only reads
them. This in-memory implementation backs the API and tests.
"""

import logging

from hireloop.core.exceptions import ProfileNotFound
from hireloop.models.candidate import CandidateProfile

logger = logging.getLogger(__name__)


class InMemoryProfileRepository:
    """Read-mostly profile store keyed by candidate id."""

    def __init__(self, profiles: list[CandidateProfile] | None = None):
        self._profiles: dict[str, CandidateProfile] = {}
        for profile in profiles or []:
            self._profiles[profile.candidate_id] = profile

    async def get_profile(self, candidate_id: str) -> CandidateProfile:
        """
        Fetch a profile snapshot.

        Raises:
            ProfileNotFound: if the candidate is unknown
        """
        profile = self._profiles.get(candidate_id)
        if profile is None:
            raise ProfileNotFound(f"Candidate {candidate_id} not found")
        # Callers get a copy so sessions never share mutable state with the store
        return profile.model_copy(deep=True)

    async def add_profile(self, profile: CandidateProfile) -> CandidateProfile:
        """Register or replace a profile."""
        self._profiles[profile.candidate_id] = profile
        logger.info(f"Stored profile for candidate {profile.candidate_id}")
        return profile
