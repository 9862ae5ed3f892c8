"""
Candidate profile models for HireLoop

Profiles are owned outside the engine. Sessions keep a read-only snapshot.
"""

import json

from pydantic import BaseModel, Field


class ProjectEvidence(BaseModel):
    """A single project the candidate claims, possibly with a fetched README."""

    name: str = ""
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    link: str | None = None
    detail: str | None = Field(
        default=None,
        description="Free-text evidence (e.g. README contents or resume excerpt)"
    )

    def is_empty(self) -> bool:
        """True when the entry carries no usable text."""
        return not any([
            self.name.strip(),
            self.description.strip(),
            self.technologies,
            (self.detail or "").strip(),
        ])


class CandidateProfile(BaseModel):
    """Snapshot of a candidate as seen by the interview engine."""

    candidate_id: str
    full_name: str = "Candidate"
    target_role: str = Field(
        ...,
        description="Role the candidate is interviewing for"
    )
    skills: list[str] = Field(default_factory=list)
    projects: list[ProjectEvidence] = Field(default_factory=list)
    resume_summary: str | None = None

    def evidence(self) -> list[ProjectEvidence]:
        """Project evidence entries that carry content."""
        return [p for p in self.projects if not p.is_empty()]

    def evidence_text(self, limit: int = 3000) -> str:
        """Evidence serialized for prompts, truncated to keep prompts bounded."""
        payload = {
            "skills": self.skills,
            "projects": [p.model_dump(exclude_none=True) for p in self.evidence()],
        }
        return json.dumps(payload, indent=2)[:limit]
