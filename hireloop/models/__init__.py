"""
Data models and schemas for HireLoop

Contains Pydantic models for:
- Candidate profiles and project evidence
- Question items
- Round results and gatekeeper verdicts
- Pipeline and conversational sessions
- Final aggregates and reports
"""

from hireloop.models.candidate import CandidateProfile, ProjectEvidence
from hireloop.models.question import QuestionItem, QuestionType
from hireloop.models.evaluation import (
    GatekeeperVerdict,
    ItemDetail,
    RoundResult,
    RoundType,
)
from hireloop.models.report import (
    CandidateReport,
    FinalAggregate,
    HiringVerdict,
    SkillMatrix,
)
from hireloop.models.interview import (
    InterviewSession,
    InterviewState,
    SessionStatus,
)
from hireloop.models.conversation import (
    ConversationAnalysis,
    ConversationSession,
    ConversationState,
    ConversationTurn,
    DifficultyDecision,
    DifficultyTier,
)

__all__ = [
    # Candidate
    "CandidateProfile",
    "ProjectEvidence",
    # Question
    "QuestionItem",
    "QuestionType",
    # Evaluation
    "GatekeeperVerdict",
    "ItemDetail",
    "RoundResult",
    "RoundType",
    # Report
    "CandidateReport",
    "FinalAggregate",
    "HiringVerdict",
    "SkillMatrix",
    # Interview
    "InterviewSession",
    "InterviewState",
    "SessionStatus",
    # Conversation
    "ConversationAnalysis",
    "ConversationSession",
    "ConversationState",
    "ConversationTurn",
    "DifficultyDecision",
    "DifficultyTier",
]
