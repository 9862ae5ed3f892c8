"""
Evaluation Engine for HireLoop

Scores round submissions. Each round type has exactly one evaluator and the
engine dispatches on the closed ``RoundType`` enumeration.

Objective items (MCQs) are always graded locally. The grading oracle is
used for free-form items and for summaries; how an oracle failure is handled
is decided per round by ``hireloop.core.policy``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from hireloop.core.exceptions import (
    InvalidInput,
    OracleMalformedResponse,
    OracleUnavailable,
)
from hireloop.core.oracle import parse_oracle_json
from hireloop.core.policy import get_policy
from hireloop.core.scoring import clamp
from hireloop.models.evaluation import ItemDetail, RoundResult, RoundType
from hireloop.models.question import QuestionItem, QuestionType
from hireloop.prompts.evaluator import EvaluatorPrompts

logger = logging.getLogger(__name__)


class EvaluationContext(BaseModel):
    """Read-only context handed to evaluators."""

    target_role: str
    candidate_name: str = "Candidate"


# =============================================================================
# ANSWER COERCION
# =============================================================================

def coerce_choice(item: QuestionItem, value: Any) -> int:
    """
    Interpret an MCQ answer as a zero-based option index.

    Raises:
        InvalidInput: if the value is not an index into the item's options
    """
    if isinstance(value, bool):
        raise InvalidInput(f"Answer for {item.id} must be an option index")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise InvalidInput(f"Answer for {item.id} must be an option index")
    if not 0 <= value < len(item.options):
        raise InvalidInput(f"Answer for {item.id} is out of range: {value}")
    return value


def coerce_text(item: QuestionItem, value: Any) -> str:
    """
    Interpret a free-form answer as text. ``None`` means unanswered.

    Raises:
        InvalidInput: if the value is not a string
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidInput(f"Answer for {item.id} must be text")
    return value.strip()


def _safe_text(item: QuestionItem, value: Any) -> str:
    """Text answer, with malformed payloads graded as empty."""
    try:
        return coerce_text(item, value)
    except InvalidInput as e:
        logger.warning(f"Malformed answer graded as empty: {e}")
        return ""


def grade_mcq_item(item: QuestionItem, answers: dict[str, Any]) -> ItemDetail:
    """Grade one MCQ item locally. Missing or malformed answers are incorrect."""
    raw = answers.get(item.id)
    is_correct = False

    if raw is not None:
        try:
            is_correct = coerce_choice(item, raw) == item.correct_index
        except InvalidInput as e:
            logger.warning(f"Malformed answer graded as incorrect: {e}")

    return ItemDetail(
        item_id=item.id,
        item_type=QuestionType.MCQ,
        prompt=item.prompt,
        user_input=raw,
        answered=raw is not None,
        is_correct=is_correct,
        correct_choice=item.correct_index,
    )


# =============================================================================
# EVALUATORS
# =============================================================================

class RoundEvaluator(ABC):
    """
    Base evaluator.

    Subclasses implement ``evaluate(questions, answers, context)`` and return
    a complete RoundResult. Missing answers never raise.
    """

    round_type: RoundType

    def __init__(self, oracle: Any, prompts: EvaluatorPrompts | None = None):
        """
        Args:
            oracle: Object exposing ``async complete(prompt) -> str``
            prompts: Prompt templates
        """
        self.oracle = oracle
        self.prompts = prompts or EvaluatorPrompts()

    @abstractmethod
    async def evaluate(
        self,
        questions: list[QuestionItem],
        answers: dict[str, Any],
        context: EvaluationContext,
    ) -> RoundResult:
        """Score one round submission."""

    def _build_result(
        self,
        answers: dict[str, Any],
        score: float,
        details: list[ItemDetail],
        summary: str = "",
        feedback: list[str] | None = None,
        complexity: dict[str, str] | None = None,
        used_default: bool = False,
    ) -> RoundResult:
        score = clamp(score)
        threshold = self.round_type.pass_threshold
        return RoundResult(
            round_number=self.round_type.round_number,
            round_type=self.round_type,
            answers=dict(answers),
            score=score,
            passed=score >= threshold,
            threshold=threshold,
            details=details,
            summary=summary,
            feedback=feedback or [],
            complexity=complexity,
            used_default=used_default,
        )

    async def _ask(self, prompt: str) -> dict[str, Any]:
        raw = await self.oracle.complete(prompt)
        return parse_oracle_json(raw)


class MCQRoundEvaluator(RoundEvaluator):
    """
    All-MCQ rounds (Aptitude, Resume Deep-Dive).

    Score = correct / total * 100. The oracle only writes the summary.
    """

    def __init__(self, round_type: RoundType, oracle: Any, prompts: EvaluatorPrompts | None = None):
        super().__init__(oracle, prompts)
        self.round_type = round_type

    async def evaluate(self, questions, answers, context):
        details = [grade_mcq_item(q, answers) for q in questions]
        correct = sum(1 for d in details if d.is_correct)
        total = len(questions)
        score = correct * 100 / total if total else 0.0
        passed = score >= self.round_type.pass_threshold

        summary = await self._summarize(context, correct, total, score, passed)

        logger.info(
            f"{self.round_type.display_name} graded: {correct}/{total} correct, score={score:.1f}"
        )
        return self._build_result(answers, score, details, summary=summary)

    async def _summarize(self, context, correct, total, score, passed) -> str:
        policy = get_policy("mcq_summary")
        prompt = self.prompts.generate_mcq_summary_prompt(
            round_type=self.round_type,
            target_role=context.target_role,
            correct=correct,
            total=total,
            score=score,
            passed=passed,
        )
        try:
            data = await self._ask(prompt)
        except (OracleUnavailable, OracleMalformedResponse) as e:
            logger.warning(f"MCQ summary unavailable, using fallback: {e}")
            return policy.default_feedback

        summary = data.get("summary")
        return summary if isinstance(summary, str) and summary.strip() else policy.default_feedback


class TechnicalRoundEvaluator(RoundEvaluator):
    """
    Technical-Mixed round: MCQs graded locally, short answers graded 0/1 by the oracle.

    Score = (mcq_correct + short_answer_sum) / total * 100. Oracle failures propagate.
    """

    round_type = RoundType.TECHNICAL

    async def evaluate(self, questions, answers, context):
        mcqs = [q for q in questions if q.type == QuestionType.MCQ]
        shorts = [q for q in questions if q.type == QuestionType.SHORT_ANSWER]

        mcq_details = {q.id: grade_mcq_item(q, answers) for q in mcqs}
        mcq_correct = sum(1 for d in mcq_details.values() if d.is_correct)

        # Only answered short answers go to the oracle
        texts = {q.id: _safe_text(q, answers.get(q.id)) for q in shorts}
        to_grade = [(q, texts[q.id]) for q in shorts if texts[q.id]]

        grades: dict[str, tuple[int, str]] = {}
        summary = ""
        if to_grade:
            grades, summary = await self._grade_short_answers(context, to_grade)

        short_details = {}
        for q in shorts:
            grade, comment = grades.get(q.id, (0, "No answer provided." if not texts[q.id] else ""))
            short_details[q.id] = ItemDetail(
                item_id=q.id,
                item_type=QuestionType.SHORT_ANSWER,
                prompt=q.prompt,
                user_input=answers.get(q.id),
                answered=bool(texts[q.id]),
                is_correct=grade == 1,
                grade=float(grade),
                feedback=comment or None,
            )

        short_sum = min(sum(int(d.grade or 0) for d in short_details.values()), len(shorts))
        total = len(questions)
        score = (mcq_correct + short_sum) * 100 / total if total else 0.0

        # Keep details in question order
        details = [mcq_details.get(q.id) or short_details[q.id] for q in questions]

        if not summary:
            summary = (
                f"Answered {mcq_correct}/{len(mcqs)} multiple-choice questions and "
                f"{short_sum}/{len(shorts)} short answers correctly."
            )

        logger.info(
            f"Technical graded: mcq={mcq_correct}/{len(mcqs)}, short={short_sum}/{len(shorts)}, "
            f"score={score:.1f}"
        )
        return self._build_result(answers, score, details, summary=summary)

    async def _grade_short_answers(
        self,
        context: EvaluationContext,
        items: list[tuple[QuestionItem, str]],
    ) -> tuple[dict[str, tuple[int, str]], str]:
        prompt = self.prompts.generate_short_answer_prompt(context.target_role, items)
        data = await self._ask(prompt)

        raw_grades = data.get("grades", data.get("shortAnswerGrades"))
        if not isinstance(raw_grades, list):
            raise OracleMalformedResponse("Short-answer grading returned no grades list", str(data))

        grades = {}
        for entry in raw_grades:
            if not isinstance(entry, dict) or "id" not in entry:
                continue
            try:
                value = 1 if float(entry.get("score", 0)) >= 1 else 0
            except (TypeError, ValueError):
                value = 0
            grades[str(entry["id"])] = (value, str(entry.get("feedback") or ""))

        summary = data.get("summary")
        return grades, summary if isinstance(summary, str) else ""


class CodingRoundEvaluator(RoundEvaluator):
    """
    Coding challenge: one submission graded holistically by the oracle.

    Empty submissions score 0 without an oracle call. Oracle failures propagate.
    """

    round_type = RoundType.CODING

    async def evaluate(self, questions, answers, context):
        if not questions:
            logger.warning("Coding round evaluated without a problem; scored 0")
            return self._build_result(
                answers, 0.0, [],
                summary="No coding problem was attached.",
                feedback=["No coding problem was attached."],
            )

        problem, extra = questions[0], questions[1:]
        raw = answers.get(problem.id)
        code = _safe_text(problem, raw)
        ungraded = [
            ItemDetail(
                item_id=item.id,
                item_type=QuestionType.CODING,
                prompt=item.prompt,
                user_input=answers.get(item.id),
                answered=bool(_safe_text(item, answers.get(item.id))),
                feedback="Only the first coding problem is graded.",
            )
            for item in extra
        ]

        if not code:
            logger.info("Coding round: empty submission scored 0")
            detail = ItemDetail(
                item_id=problem.id,
                item_type=QuestionType.CODING,
                prompt=problem.prompt,
                user_input=raw,
                answered=False,
                grade=0.0,
                feedback="No code was submitted.",
            )
            return self._build_result(
                answers, 0.0, [detail, *ungraded],
                summary="No code was submitted.",
                feedback=["No code was submitted."],
            )

        data = await self._ask(self.prompts.generate_coding_prompt(problem, code))

        try:
            score = clamp(float(data["score"]))
        except (KeyError, TypeError, ValueError) as e:
            raise OracleMalformedResponse("Coding grade has no numeric score", str(data)) from e

        feedback = [str(f) for f in data.get("feedback") or [] if f][:3]
        raw_complexity = data.get("complexity")
        complexity = None
        if isinstance(raw_complexity, dict):
            complexity = {
                "time": str(raw_complexity.get("time", "unknown")),
                "space": str(raw_complexity.get("space", "unknown")),
            }
        analysis = data.get("analysis")

        detail = ItemDetail(
            item_id=problem.id,
            item_type=QuestionType.CODING,
            prompt=problem.prompt,
            user_input=raw,
            answered=True,
            grade=score,
            feedback=analysis if isinstance(analysis, str) else None,
        )

        logger.info(f"Coding graded: score={score:.1f}")
        return self._build_result(
            answers, score, [detail, *ungraded],
            summary=analysis if isinstance(analysis, str) else "",
            feedback=feedback,
            complexity=complexity,
        )


class WrittenRoundEvaluator(RoundEvaluator):
    """
    Written communication: responses graded holistically.

    Fails open. Oracle failure yields the policy default score.
    """

    round_type = RoundType.WRITTEN_COMMUNICATION

    DEFAULT_FEEDBACK = "Written responses evaluated."

    async def evaluate(self, questions, answers, context):
        texts = {q.id: _safe_text(q, answers.get(q.id)) for q in questions}

        def details(feedback: str | None = None) -> list[ItemDetail]:
            return [
                ItemDetail(
                    item_id=q.id,
                    item_type=QuestionType.WRITTEN_TASK,
                    prompt=q.prompt,
                    user_input=answers.get(q.id),
                    answered=bool(texts[q.id]),
                    feedback=feedback if texts[q.id] else "No response provided.",
                )
                for q in questions
            ]

        if not any(texts.values()):
            logger.info("Written round: no responses, scored 0")
            return self._build_result(
                answers, 0.0, details(),
                summary="No written responses were submitted.",
                feedback=["No written responses were submitted."],
            )

        policy = get_policy("written_communication")
        prompt = self.prompts.generate_written_prompt(
            context.target_role,
            [(q, texts[q.id]) for q in questions],
        )

        try:
            data = await self._ask(prompt)
            score = clamp(float(data["score"]))
        except (OracleUnavailable, OracleMalformedResponse, KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Written grading failed, applying default score {policy.default_score}: {e}"
            )
            return self._build_result(
                answers, policy.default_score, details(),
                summary=policy.default_feedback,
                feedback=[policy.default_feedback],
                used_default=True,
            )

        feedback = data.get("feedback")
        if not isinstance(feedback, str) or not feedback.strip():
            feedback = self.DEFAULT_FEEDBACK

        logger.info(f"Written graded: score={score:.1f}")
        return self._build_result(
            answers, score, details(feedback),
            summary=feedback,
            feedback=[feedback],
        )


# =============================================================================
# ENGINE
# =============================================================================

class EvaluationEngine:
    """
    Central evaluation component.

    Holds one evaluator per round type and dispatches submissions to it.
    """

    def __init__(self, oracle: Any, prompts: EvaluatorPrompts | None = None):
        """
        Initialize evaluation engine.

        Args:
            oracle: Grading oracle used by every evaluator
            prompts: Shared prompt templates
        """
        prompts = prompts or EvaluatorPrompts()
        self._evaluators: dict[RoundType, RoundEvaluator] = {
            RoundType.APTITUDE: MCQRoundEvaluator(RoundType.APTITUDE, oracle, prompts),
            RoundType.TECHNICAL: TechnicalRoundEvaluator(oracle, prompts),
            RoundType.RESUME_DEEP_DIVE: MCQRoundEvaluator(RoundType.RESUME_DEEP_DIVE, oracle, prompts),
            RoundType.CODING: CodingRoundEvaluator(oracle, prompts),
            RoundType.WRITTEN_COMMUNICATION: WrittenRoundEvaluator(oracle, prompts),
        }

    def get_evaluator(self, round_type: RoundType) -> RoundEvaluator:
        return self._evaluators[round_type]

    async def evaluate(
        self,
        round_type: RoundType,
        questions: list[QuestionItem],
        answers: dict[str, Any],
        context: EvaluationContext,
    ) -> RoundResult:
        """
        Evaluate one round submission.

        Args:
            round_type: Which round is being graded
            questions: The round's question items
            answers: Raw answers keyed by question id
            context: Candidate context

        Returns:
            Complete RoundResult
        """
        return await self._evaluators[round_type].evaluate(questions, answers, context)
