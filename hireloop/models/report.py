"""
Report models for HireLoop

Defines the final aggregate of a completed pipeline and the human-facing
report card built from it.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class HiringVerdict(str, Enum):
    """Final hiring recommendation."""

    STRONG_HIRE = "STRONG HIRE"
    HIRE = "HIRE"
    BORDERLINE = "BORDERLINE"
    NO_HIRE = "NO HIRE"

    @classmethod
    def from_score(cls, headline_score: int) -> "HiringVerdict":
        """Map a 0-100 headline score onto the fixed threshold table."""
        if headline_score >= 85:
            return cls.STRONG_HIRE
        elif headline_score >= 70:
            return cls.HIRE
        elif headline_score >= 55:
            return cls.BORDERLINE
        else:
            return cls.NO_HIRE

    @property
    def description(self) -> str:
        """Verdict description."""
        descriptions = {
            "STRONG HIRE": "Exceptional across rounds and would be a strong addition to the team.",
            "HIRE": "Solid competence and would perform well in the role.",
            "BORDERLINE": "Has potential but may need additional support or training.",
            "NO HIRE": "Requires significant development before being ready for this role.",
        }
        return descriptions.get(self.value, "")


class SkillMatrix(BaseModel):
    """0-10 trait scores derived from round scores."""

    model_config = ConfigDict(frozen=True)

    logic: float = Field(..., ge=0, le=10)
    technical: float = Field(..., ge=0, le=10)
    experience: float = Field(..., ge=0, le=10)
    problem_solving: float = Field(..., ge=0, le=10)
    communication: float = Field(..., ge=0, le=10)
    cultural: float = Field(..., ge=0, le=10)


class FinalAggregate(BaseModel):
    """Aggregate computed once, after round 5 resolves."""

    model_config = ConfigDict(frozen=True)

    round_scores: list[float] = Field(..., min_length=5, max_length=5)
    headline_score: int = Field(..., ge=0, le=100)
    verdict: HiringVerdict
    matrix: SkillMatrix
    computed_at: datetime = Field(default_factory=datetime.utcnow)


class CandidateReport(BaseModel):
    """Verdict object handed to presentation layers."""

    session_id: str
    generated_at: datetime = Field(default_factory=datetime.utcnow)

    candidate_name: str
    target_role: str

    # === SCORES ===
    round_scores: dict[str, float] = Field(default_factory=dict)
    headline_score: int = Field(..., ge=0, le=100)
    verdict: HiringVerdict
    matrix: SkillMatrix | None = None

    # === OUTCOME ===
    screened_out: bool = False
    rejection_reason: str | None = None

    # === QUALITATIVE FEEDBACK ===
    summary: str = ""
    recommendation: str = ""
    selling_points: list[str] = Field(
        default_factory=list,
        description="Strongest rounds first"
    )
    round_feedback: dict[str, list[str]] = Field(default_factory=dict)
    narrative_is_fallback: bool = False
