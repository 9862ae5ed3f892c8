"""
Question Generator

Asks the oracle for a round's question set and normalizes the loosely
structured reply into QuestionItems. Generation does not fail open: a set
that cannot be parsed raises OracleMalformedResponse.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from hireloop.core.exceptions import OracleMalformedResponse
from hireloop.core.oracle import parse_oracle_json, strip_fences
from hireloop.models.candidate import CandidateProfile
from hireloop.models.evaluation import RoundType
from hireloop.models.question import QuestionItem, QuestionType
from hireloop.prompts.interviewer import InterviewerPrompts

logger = logging.getLogger(__name__)

TECHNICAL_MCQ_COUNT = 8


class QuestionGenerator:
    """Generates question sets for pipeline rounds."""

    def __init__(self, oracle: Any, prompts: InterviewerPrompts | None = None):
        self.oracle = oracle
        self.prompts = prompts or InterviewerPrompts()

    async def generate(
        self,
        round_type: RoundType,
        candidate: CandidateProfile,
        directives: list[str] | None = None,
    ) -> list[QuestionItem]:
        """
        Generate the question set for a round.

        Args:
            round_type: Round to generate for
            candidate: Candidate snapshot
            directives: Session instructions threaded into the prompt

        Returns:
            Normalized question items

        Raises:
            OracleUnavailable: oracle could not be reached
            OracleMalformedResponse: reply could not be turned into questions
        """
        prompt = self.prompts.generate_round_questions_prompt(round_type, candidate, directives)
        logger.debug(f"Built {round_type.value} generation prompt, length: {len(prompt)}")

        raw = await self.oracle.complete(prompt)
        entries = self._extract_entries(raw, round_type)
        items = self._normalize(entries, round_type, raw)

        logger.info(f"Generated {len(items)} questions for {round_type.display_name}")
        return items

    def _extract_entries(self, raw: str, round_type: RoundType) -> list[dict]:
        """Pull the list of question objects out of the reply."""
        cleaned = strip_fences(raw or "")
        try:
            data: Any = json.loads(cleaned)
        except json.JSONDecodeError:
            data = parse_oracle_json(raw)

        if isinstance(data, dict):
            # The coding round returns a single problem object
            if round_type == RoundType.CODING and ("problemStatement" in data or "question" in data):
                data = [data]
            else:
                data = data.get("questions") or data.get("data") or []

        if not isinstance(data, list) or not data:
            raise OracleMalformedResponse(
                f"{round_type.display_name} generation returned no questions", raw
            )
        return [entry for entry in data if isinstance(entry, dict)]

    def _normalize(self, entries: list[dict], round_type: RoundType, raw: str) -> list[QuestionItem]:
        items = []
        seen_ids: set[str] = set()

        for index, entry in enumerate(entries):
            item_id = str(entry.get("id", index + 1))
            if item_id in seen_ids:
                item_id = f"{round_type.round_number}_{index + 1}"
            seen_ids.add(item_id)

            item_type = self._item_type(entry, round_type, index)
            try:
                items.append(self._build_item(entry, item_id, item_type))
            except (ValidationError, TypeError, ValueError) as e:
                raise OracleMalformedResponse(
                    f"Invalid question {item_id} in {round_type.display_name} set: {e}", raw
                ) from e

        if round_type == RoundType.CODING:
            items = items[:1]
        if not items:
            raise OracleMalformedResponse(
                f"{round_type.display_name} generation returned no usable questions", raw
            )
        return items

    def _item_type(self, entry: dict, round_type: RoundType, index: int) -> QuestionType:
        if round_type == RoundType.TECHNICAL:
            declared = str(entry.get("type", "")).lower()
            if declared in ("mcq", "short_answer"):
                return QuestionType(declared)
            return QuestionType.MCQ if index < TECHNICAL_MCQ_COUNT else QuestionType.SHORT_ANSWER

        type_map = {
            RoundType.APTITUDE: QuestionType.MCQ,
            RoundType.RESUME_DEEP_DIVE: QuestionType.MCQ,
            RoundType.CODING: QuestionType.CODING,
            RoundType.WRITTEN_COMMUNICATION: QuestionType.WRITTEN_TASK,
        }
        return type_map[round_type]

    def _build_item(self, entry: dict, item_id: str, item_type: QuestionType) -> QuestionItem:
        title = entry.get("title")
        topic = entry.get("topic") or entry.get("category") or entry.get("context")

        if item_type == QuestionType.MCQ:
            correct = entry.get("correctAnswer", entry.get("correct_index"))
            return QuestionItem(
                id=item_id,
                type=item_type,
                prompt=str(entry.get("question", "")),
                topic=topic,
                options=[str(o) for o in entry.get("options") or []],
                correct_index=int(correct) if correct is not None else None,
                explanation=entry.get("explanation"),
            )

        if item_type == QuestionType.SHORT_ANSWER:
            return QuestionItem(
                id=item_id,
                type=item_type,
                prompt=str(entry.get("question", "")),
                topic=topic,
                rubric_hint=entry.get("explanation"),
            )

        if item_type == QuestionType.CODING:
            return QuestionItem(
                id=item_id,
                type=item_type,
                title=title,
                prompt=str(entry.get("problemStatement") or entry.get("question", "")),
                constraints=[str(c) for c in entry.get("constraints") or []],
                boilerplate=entry.get("boilerplate"),
                language=entry.get("language"),
            )

        scenario = str(entry.get("scenario") or "")
        instruction = str(entry.get("instruction") or entry.get("question") or "")
        return QuestionItem(
            id=item_id,
            type=item_type,
            title=title,
            prompt=f"{scenario}\n\n{instruction}".strip(),
            topic=topic,
        )
