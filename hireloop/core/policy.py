"""Centralized failure policies for oracle-dependent components.

Each component that can hit the grading oracle declares here what happens
when the oracle is unavailable or returns garbage. Evaluators, the gatekeeper,
and the report composer read their defaults from this table so tests can pin
the exact values.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class FailureMode(str, Enum):
    """How a component reacts to an oracle failure."""

    FAIL_OPEN = "fail_open"      # substitute a passing / neutral default
    FAIL_CLOSED = "fail_closed"  # substitute a failing default
    PROPAGATE = "propagate"      # surface the error, leave state untouched


class FailurePolicy(BaseModel):
    """Declared behaviour of one component on dependency failure."""

    model_config = ConfigDict(frozen=True)

    component: str
    mode: FailureMode
    default_score: float | None = None
    default_feedback: str | None = None
    notes: str = ""


WRITTEN_DEFAULT_SCORE = 70.0
"""Score assigned to the written-communication round when grading fails."""

GATEKEEPER_BYPASS_MATCH_SCORE = 100
"""Match score reported when the gatekeeper audit is bypassed."""

CULTURAL_FIT_NEUTRAL = 7.0
"""Fixed skill-matrix slot that no round measures."""

CONVERSATION_COMMUNICATION_DEFAULT = 70.0
"""Communication score used when conversation analysis cannot reach the oracle."""


FAILURE_POLICIES: dict[str, FailurePolicy] = {
    "gatekeeper": FailurePolicy(
        component="gatekeeper",
        mode=FailureMode.FAIL_OPEN,
        default_score=GATEKEEPER_BYPASS_MATCH_SCORE,
        default_feedback="Audit failed to run, bypassing to prevent false rejection.",
        notes="Infrastructure failures never screen a candidate out.",
    ),
    "gatekeeper_empty": FailurePolicy(
        component="gatekeeper_empty",
        mode=FailureMode.FAIL_CLOSED,
        default_score=0,
        default_feedback="No projects or skill evidence found",
        notes="Nothing to audit, so there is nothing to bypass.",
    ),
    "written_communication": FailurePolicy(
        component="written_communication",
        mode=FailureMode.FAIL_OPEN,
        default_score=WRITTEN_DEFAULT_SCORE,
        default_feedback=(
            "Automated grading was unavailable; a default score was applied "
            "to your written responses."
        ),
    ),
    "report_narrative": FailurePolicy(
        component="report_narrative",
        mode=FailureMode.FAIL_OPEN,
        default_feedback="Narrative generation unavailable; summary built from round scores.",
        notes="The numeric verdict is never blocked by narrative failure.",
    ),
    "conversation_analysis": FailurePolicy(
        component="conversation_analysis",
        mode=FailureMode.FAIL_OPEN,
        default_score=CONVERSATION_COMMUNICATION_DEFAULT,
        default_feedback="Detailed analysis unavailable; scores derived from per-answer grades.",
    ),
    "mcq_summary": FailurePolicy(
        component="mcq_summary",
        mode=FailureMode.FAIL_OPEN,
        default_feedback="Summary unavailable; score reflects objectively graded answers.",
        notes="MCQ correctness is graded locally and never depends on the oracle.",
    ),
    "technical_short_answer": FailurePolicy(
        component="technical_short_answer",
        mode=FailureMode.PROPAGATE,
    ),
    "coding_challenge": FailurePolicy(
        component="coding_challenge",
        mode=FailureMode.PROPAGATE,
    ),
    "question_generation": FailurePolicy(
        component="question_generation",
        mode=FailureMode.PROPAGATE,
    ),
    "conversation_turn": FailurePolicy(
        component="conversation_turn",
        mode=FailureMode.PROPAGATE,
    ),
}


def get_policy(component: str) -> FailurePolicy:
    """Look up the failure policy for a component."""
    return FAILURE_POLICIES[component]
