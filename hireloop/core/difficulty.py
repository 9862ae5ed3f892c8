"""
Adaptive Difficulty Controller

Chooses the tier of the next conversational question and whether it must
probe the same topic again. Rules are evaluated in order and the first
match wins:

1. Short answer (< 25 words) or running average < 5  -> weak, probe
2. Average >= 8 after at least 3 questions           -> advanced
3. Average < 4 after at least 2 questions            -> foundational
4. Otherwise                                         -> standard
"""

import logging

from hireloop.config.settings import get_settings
from hireloop.models.conversation import DifficultyDecision, DifficultyTier

logger = logging.getLogger(__name__)

WEAK_WORD_COUNT = 25
WEAK_AVERAGE = 5.0
ADVANCED_AVERAGE = 8.0
ADVANCED_MIN_QUESTIONS = 3
FOUNDATIONAL_AVERAGE = 4.0
FOUNDATIONAL_MIN_QUESTIONS = 2

DEFAULT_RUNNING_AVERAGE = 5.0

# Conversations never finish before this many answered questions
MIN_QUESTIONS_FLOOR = 6


def count_words(text: str) -> int:
    return len(text.split())


class AdaptiveDifficultyController:
    """Stateless decision function over server-owned counters."""

    def __init__(self, min_questions: int | None = None):
        configured = (
            min_questions if min_questions is not None
            else get_settings().conversation_min_questions
        )
        self.min_questions = max(MIN_QUESTIONS_FLOOR, configured)

    def decide(
        self,
        question_count: int,
        running_average: float | None,
        word_count: int,
    ) -> DifficultyDecision:
        """
        Decide the next question's tier.

        Args:
            question_count: Questions answered, including the latest one
            running_average: Mean 0-10 score so far (None before any grade)
            word_count: Word count of the latest answer

        Returns:
            DifficultyDecision
        """
        average = DEFAULT_RUNNING_AVERAGE if running_average is None else running_average
        may_finish = question_count >= self.min_questions

        if word_count < WEAK_WORD_COUNT or average < WEAK_AVERAGE:
            tier, is_weak = DifficultyTier.STANDARD, True
        elif average >= ADVANCED_AVERAGE and question_count >= ADVANCED_MIN_QUESTIONS:
            tier, is_weak = DifficultyTier.ADVANCED, False
        elif average < FOUNDATIONAL_AVERAGE and question_count >= FOUNDATIONAL_MIN_QUESTIONS:
            tier, is_weak = DifficultyTier.FOUNDATIONAL, False
        else:
            tier, is_weak = DifficultyTier.STANDARD, False

        decision = DifficultyDecision(
            tier=tier,
            is_weak=is_weak,
            is_probe=is_weak,
            may_finish=may_finish,
            question_count=question_count,
            running_average=average,
            word_count=word_count,
        )
        logger.debug(f"Difficulty decision: {decision}")
        return decision

    def render_instructions(self, decision: DifficultyDecision) -> str:
        """Render a decision as interviewer prompt instructions."""
        if decision.tier == DifficultyTier.ADVANCED:
            difficulty = (
                "DIFFICULTY: This candidate is performing excellently. Ask ADVANCED/SENIOR-LEVEL "
                "questions: edge cases, system design, optimization, and nuanced trade-offs."
            )
        elif decision.tier == DifficultyTier.FOUNDATIONAL:
            difficulty = (
                "DIFFICULTY: This candidate is struggling. Pivot to FOUNDATIONAL concepts: "
                "basic definitions, simple examples, entry-level understanding."
            )
        else:
            difficulty = "DIFFICULTY: Maintain standard mid-level interview difficulty."

        if decision.is_probe:
            probe = (
                "PROBE REQUIREMENT: The candidate's last answer was too brief or lacked technical "
                f"depth (word count: {decision.word_count}, average: "
                f"{decision.running_average:.1f}/10). The next question MUST be a follow-up probe "
                "on the SAME topic, e.g. \"Can you walk me through the exact steps?\""
            )
        else:
            probe = "You may move on to a new topic."

        if not decision.may_finish:
            finish = "Do NOT finish the interview yet; always ask a next question."
        else:
            finish = "You may finish the interview if coverage is adequate."

        return "\n".join([difficulty, probe, finish])
