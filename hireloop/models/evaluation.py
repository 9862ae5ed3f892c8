"""
Evaluation models for HireLoop

Defines the round taxonomy, per-item grading detail, immutable round
results, and the gatekeeper verdict.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hireloop.models.question import QuestionType


class RoundType(str, Enum):
    """The five fixed assessment rounds, in pipeline order."""

    APTITUDE = "aptitude"
    TECHNICAL = "technical"
    RESUME_DEEP_DIVE = "resume_deep_dive"
    CODING = "coding"
    WRITTEN_COMMUNICATION = "written_communication"

    @classmethod
    def for_round(cls, round_number: int) -> "RoundType":
        """Round type for a 1-based round number."""
        ordered = list(cls)
        if not 1 <= round_number <= len(ordered):
            raise ValueError(f"Round number must be 1-{len(ordered)}, got {round_number}")
        return ordered[round_number - 1]

    @property
    def round_number(self) -> int:
        """1-based position in the pipeline."""
        return list(RoundType).index(self) + 1

    @property
    def display_name(self) -> str:
        """Human-readable round name."""
        names = {
            "aptitude": "Aptitude",
            "technical": "Technical",
            "resume_deep_dive": "Resume Deep-Dive",
            "coding": "Coding Challenge",
            "written_communication": "Written Communication",
        }
        return names.get(self.value, self.value)

    @property
    def pass_threshold(self) -> float:
        """Minimum score (0-100) for the round to count as passed."""
        thresholds = {
            "aptitude": 50.0,
            "technical": 60.0,
            "resume_deep_dive": 70.0,  # probes claimed personal experience
            "coding": 60.0,
            "written_communication": 60.0,
        }
        return thresholds[self.value]

    @property
    def item_types(self) -> set[QuestionType]:
        """Question item types a round of this kind accepts."""
        types = {
            "aptitude": {QuestionType.MCQ},
            "technical": {QuestionType.MCQ, QuestionType.SHORT_ANSWER},
            "resume_deep_dive": {QuestionType.MCQ},
            "coding": {QuestionType.CODING},
            "written_communication": {QuestionType.WRITTEN_TASK},
        }
        return types[self.value]

    @property
    def max_items(self) -> int | None:
        """Largest question set the round accepts, if bounded."""
        limits = {"coding": 1, "written_communication": 5}
        return limits.get(self.value)


class ItemDetail(BaseModel):
    """Grading detail for one question item, kept for audit and reporting."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    item_type: QuestionType
    prompt: str = ""
    user_input: Any = None
    answered: bool = False

    # Objective items
    is_correct: bool | None = None
    correct_choice: int | None = None

    # Oracle-graded items (0/1 for short answers, 0-100 for holistic grades)
    grade: float | None = None
    feedback: str | None = None


class RoundResult(BaseModel):
    """Outcome of one evaluated round. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    round_number: int = Field(..., ge=1, le=5)
    round_type: RoundType
    answers: dict[str, Any] = Field(default_factory=dict)

    score: float = Field(..., ge=0, le=100)
    passed: bool
    threshold: float

    details: list[ItemDetail] = Field(default_factory=list)
    summary: str = ""
    feedback: list[str] = Field(default_factory=list)

    # Coding round extras
    complexity: dict[str, str] | None = None

    # True when a fail-open default replaced the oracle's grade
    used_default: bool = False

    evaluated_at: datetime = Field(default_factory=datetime.utcnow)


class GatekeeperVerdict(BaseModel):
    """Result of the one-time project/skill authenticity audit."""

    model_config = ConfigDict(frozen=True)

    verified: bool
    match_score: int = Field(..., ge=0, le=100)
    reason: str
    bypassed: bool = Field(
        default=False,
        description="True when the audit could not run and the candidate was let through"
    )
    audited_at: datetime = Field(default_factory=datetime.utcnow)
