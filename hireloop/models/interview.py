"""
Interview session and state models for HireLoop
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from hireloop.models.candidate import CandidateProfile
from hireloop.models.evaluation import GatekeeperVerdict, RoundResult, RoundType
from hireloop.models.question import QuestionItem
from hireloop.models.report import FinalAggregate

TOTAL_ROUNDS = 5
GATE_AFTER_ROUND = 2


class InterviewState(str, Enum):
    """Pipeline state machine states."""

    ROUND_1_ACTIVE = "round_1_active"
    ROUND_2_ACTIVE = "round_2_active"
    GATE_CHECK = "gate_check"
    ROUND_3_ACTIVE = "round_3_active"
    ROUND_4_ACTIVE = "round_4_active"
    ROUND_5_ACTIVE = "round_5_active"

    # Terminal
    COMPLETED = "completed"
    SCREENED_OUT = "screened_out"

    @classmethod
    def for_round(cls, round_number: int) -> "InterviewState":
        """Active state for a 1-based round number."""
        return cls(f"round_{round_number}_active")

    @property
    def is_terminal(self) -> bool:
        return self in (InterviewState.COMPLETED, InterviewState.SCREENED_OUT)


class SessionStatus(str, Enum):
    """Coarse termination status exposed to callers."""

    IN_PROGRESS = "in_progress"
    SCREENED_OUT = "screened_out"
    COMPLETED = "completed"


class InterviewSession(BaseModel):
    """Complete pipeline session state. Written only by the orchestrator."""

    # Identification
    session_id: str = Field(default_factory=lambda: str(uuid4()))

    # Candidate snapshot taken at session start
    candidate: CandidateProfile

    # State
    state: InterviewState = Field(default=InterviewState.ROUND_1_ACTIVE)

    # Timing
    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None

    # Rounds
    round_results: list[RoundResult | None] = Field(
        default_factory=lambda: [None] * TOTAL_ROUNDS
    )
    question_sets: dict[int, list[QuestionItem]] = Field(default_factory=dict)

    # Extra instructions threaded into question generation, per round
    generation_directives: dict[int, list[str]] = Field(default_factory=dict)

    # Gate
    gatekeeper_verdict: GatekeeperVerdict | None = None

    # Outcome
    headline_score: int | None = None
    rejection_reason: str | None = None
    final_aggregate: FinalAggregate | None = None

    @property
    def target_role(self) -> str:
        return self.candidate.target_role

    @property
    def status(self) -> SessionStatus:
        if self.state == InterviewState.SCREENED_OUT:
            return SessionStatus.SCREENED_OUT
        if self.state == InterviewState.COMPLETED:
            return SessionStatus.COMPLETED
        return SessionStatus.IN_PROGRESS

    @property
    def resulted_rounds(self) -> int:
        """Number of rounds with a stored result."""
        return sum(1 for r in self.round_results if r is not None)

    @property
    def current_round(self) -> int:
        """
        Round the session is on, derived from stored results.

        Results are only ever appended in order, so this never decreases.
        """
        return min(self.resulted_rounds + 1, TOTAL_ROUNDS)

    @property
    def current_round_type(self) -> RoundType:
        return RoundType.for_round(self.current_round)

    def get_result(self, round_number: int) -> RoundResult | None:
        """Stored result for a round, if any."""
        return self.round_results[round_number - 1]

    def round_scores(self) -> list[float]:
        """Scores of resulted rounds, in order."""
        return [r.score for r in self.round_results if r is not None]

    def get_duration_seconds(self) -> float:
        """Session duration in seconds."""
        end = self.completed_at or datetime.utcnow()
        return (end - self.created_at).total_seconds()
