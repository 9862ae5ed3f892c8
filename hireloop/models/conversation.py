"""
Conversational interview models for HireLoop

The chat-style round asks one question at a time, adapting difficulty to
the candidate's running performance.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from hireloop.models.candidate import CandidateProfile
from hireloop.models.evaluation import GatekeeperVerdict


class DifficultyTier(str, Enum):
    """Difficulty requested for the next conversational question."""

    FOUNDATIONAL = "foundational"
    STANDARD = "standard"
    ADVANCED = "advanced"


class DifficultyDecision(BaseModel):
    """Controller output for one turn."""

    model_config = ConfigDict(frozen=True)

    tier: DifficultyTier
    is_weak: bool = False
    is_probe: bool = False
    may_finish: bool = False
    question_count: int
    running_average: float
    word_count: int


class ConversationState(str, Enum):
    """Conversational session states."""

    ACTIVE = "active"
    SCREENED_OUT = "screened_out"
    FINISHED = "finished"


class ConversationTurn(BaseModel):
    """One question/answer exchange with its grade."""

    question: str
    answer: str
    score: float = Field(default=0.0, ge=0, le=10)
    confidence: float = Field(default=0.0, ge=0, le=10)
    feedback: str = ""
    is_probe: bool = False
    tier: DifficultyTier = DifficultyTier.STANDARD
    answered_at: datetime = Field(default_factory=datetime.utcnow)


class ConversationSession(BaseModel):
    """Server-owned state of a conversational interview."""

    session_id: str = Field(default_factory=lambda: str(uuid4()))
    candidate: CandidateProfile

    state: ConversationState = Field(default=ConversationState.ACTIVE)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    turns: list[ConversationTurn] = Field(default_factory=list)
    current_question: str | None = None
    current_question_is_probe: bool = False
    current_question_tier: DifficultyTier = DifficultyTier.STANDARD

    gatekeeper_verdict: GatekeeperVerdict | None = None
    deep_probe_directive: str | None = None
    rejection_reason: str | None = None

    @property
    def target_role(self) -> str:
        return self.candidate.target_role

    @property
    def question_count(self) -> int:
        """Questions answered so far, derived from stored turns."""
        return len(self.turns)

    @property
    def running_average(self) -> float | None:
        """Mean 0-10 score over answered turns, or None before the first answer."""
        if not self.turns:
            return None
        return sum(t.score for t in self.turns) / len(self.turns)

    def get_conversation_history_str(self) -> str:
        """Conversation so far as a transcript string for prompts."""
        lines = []
        for turn in self.turns:
            lines.append(f"Interviewer: {turn.question}")
            lines.append(f"Candidate: {turn.answer}")
        return "\n".join(lines)


class ConversationAnalysis(BaseModel):
    """Weighted post-interview analysis of a conversational transcript."""

    session_id: str
    technical_score: float = Field(..., ge=0, le=100)
    communication_score: float = Field(..., ge=0, le=100)
    confidence_score: float = Field(..., ge=0, le=100)
    overall_score: float = Field(..., ge=0, le=100)

    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    resources: list[dict[str, str]] = Field(default_factory=list)
    summary: str = ""
    used_default: bool = False
