"""
Score aggregation functions.

Two aggregations exist and are deliberately kept apart:
- ``final_round_average``: plain mean of the five pipeline round scores
- ``weighted_conversation_score``: 40/30/30 blend used for conversational transcripts
"""

import math

from hireloop.core.policy import CULTURAL_FIT_NEUTRAL
from hireloop.models.interview import TOTAL_ROUNDS
from hireloop.models.report import SkillMatrix

# Conversational analysis weights
TECHNICAL_WEIGHT = 0.4
COMMUNICATION_WEIGHT = 0.3
CONFIDENCE_WEIGHT = 0.3


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 always rounding up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def final_round_average(round_scores: list[float]) -> int:
    """
    Headline score of a completed pipeline.

    Args:
        round_scores: Exactly five round scores (0-100), in round order

    Returns:
        Mean of the scores, rounded half-up to an integer
    """
    if len(round_scores) != TOTAL_ROUNDS:
        raise ValueError(f"Expected {TOTAL_ROUNDS} round scores, got {len(round_scores)}")
    return round_half_up(sum(round_scores) / TOTAL_ROUNDS)


def weighted_conversation_score(
    technical: float,
    communication: float,
    confidence: float,
) -> float:
    """Overall conversational score: technical 40%, communication 30%, confidence 30%."""
    overall = (
        technical * TECHNICAL_WEIGHT
        + communication * COMMUNICATION_WEIGHT
        + confidence * CONFIDENCE_WEIGHT
    )
    return round(clamp(overall), 1)


def build_skill_matrix(round_scores: list[float]) -> SkillMatrix:
    """Map the five round scores onto 0-10 trait slots."""
    if len(round_scores) != TOTAL_ROUNDS:
        raise ValueError(f"Expected {TOTAL_ROUNDS} round scores, got {len(round_scores)}")

    r1, r2, r3, r4, r5 = (round(clamp(s) / 10, 1) for s in round_scores)
    return SkillMatrix(
        logic=r1,
        technical=r2,
        experience=r3,
        problem_solving=r4,
        communication=r5,
        cultural=CULTURAL_FIT_NEUTRAL,
    )
