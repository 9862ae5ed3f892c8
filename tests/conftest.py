import asyncio
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hireloop.core.exceptions import OracleUnavailable
from hireloop.core.profiles import InMemoryProfileRepository
from hireloop.models.candidate import CandidateProfile, ProjectEvidence
from hireloop.models.question import QuestionItem, QuestionType


class ScriptedOracle:
    """Fake oracle replaying canned replies in order.

    A reply may be a dict (sent as JSON), a string, an exception instance
    (raised), or a callable taking the prompt.
    """

    def __init__(self, *replies, default=None):
        self.replies = list(replies)
        self.default = default
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else self.default
        return _render(reply, prompt)


class RoutingOracle:
    """Fake oracle choosing a reply by the first marker found in the prompt."""

    def __init__(self, routes: dict, default=None):
        self.routes = routes
        self.default = default
        self.prompts: list[str] = []

    def prompts_matching(self, marker: str) -> list[str]:
        return [p for p in self.prompts if marker in p]

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        for marker, reply in self.routes.items():
            if marker in prompt:
                return _render(reply, prompt)
        return _render(self.default, prompt)


def _render(reply, prompt: str) -> str:
    if reply is None:
        raise OracleUnavailable("no scripted reply")
    if isinstance(reply, Exception):
        raise reply
    if callable(reply):
        reply = reply(prompt)
    if isinstance(reply, (dict, list)):
        return json.dumps(reply)
    return reply


# Prompt markers used to route fake oracle replies
MCQ_SUMMARY = "Write a short summary (1-2 sentences)"
SHORT_ANSWERS = "SHORT ANSWER RESPONSES"
CODE_REVIEW = "automated code reviewer"
WRITTEN_GRADING = "Evaluate these written assessment responses"
GATEKEEPER = "strict technical gatekeeper"
NARRATIVE = "Write the narrative for this candidate's final report"
DEEP_DIVE_GENERATION = "Deep-Dive MCQ questions"
OPENING_QUESTION = "Generate the FIRST interview question"
TURN = "Candidate's Latest Answer"
TRANSCRIPT_ANALYSIS = "analyzing a mock interview transcript"


def run(coro):
    return asyncio.run(coro)


def mcq(item_id: str, correct: int = 0, options: int = 4) -> QuestionItem:
    return QuestionItem(
        id=item_id,
        type=QuestionType.MCQ,
        prompt=f"Question {item_id}",
        options=[f"Option {i}" for i in range(options)],
        correct_index=correct,
    )


def mcq_set(count: int = 10, prefix: str = "q") -> list[QuestionItem]:
    return [mcq(f"{prefix}{i}", correct=i % 4) for i in range(1, count + 1)]


def technical_set() -> list[QuestionItem]:
    items = mcq_set(8, prefix="t")
    items += [
        QuestionItem(id="t9", type=QuestionType.SHORT_ANSWER, prompt="Explain indexing",
                     rubric_hint="B-trees, selectivity"),
        QuestionItem(id="t10", type=QuestionType.SHORT_ANSWER, prompt="Explain caching",
                     rubric_hint="invalidation, TTL"),
    ]
    return items


def coding_set() -> list[QuestionItem]:
    return [
        QuestionItem(
            id="c1",
            type=QuestionType.CODING,
            title="Two Sum",
            prompt="Return indices of two numbers adding to target.",
            constraints=["O(n) time"],
            language="Python",
        )
    ]


def written_set(count: int = 5) -> list[QuestionItem]:
    return [
        QuestionItem(id=f"w{i}", type=QuestionType.WRITTEN_TASK, title=f"Task {i}",
                     prompt=f"Write response {i}")
        for i in range(1, count + 1)
    ]


def answers_correct(questions: list[QuestionItem], correct: int) -> dict:
    """MCQ answers with exactly ``correct`` right answers, in question order."""
    answers = {}
    for index, item in enumerate(questions):
        if index < correct:
            answers[item.id] = item.correct_index
        else:
            answers[item.id] = (item.correct_index + 1) % len(item.options)
    return answers


@pytest.fixture
def profile() -> CandidateProfile:
    return CandidateProfile(
        candidate_id="cand-1",
        full_name="Asha Rao",
        target_role="Backend Engineer",
        skills=["Python", "PostgreSQL", "FastAPI"],
        projects=[
            ProjectEvidence(
                name="ledger-service",
                description="Double-entry ledger API",
                technologies=["FastAPI", "SQLAlchemy"],
                detail="Uses session.begin_nested() and a reconcile_balances() task",
            )
        ],
    )


@pytest.fixture
def empty_profile() -> CandidateProfile:
    return CandidateProfile(candidate_id="cand-empty", target_role="Backend Engineer")


@pytest.fixture
def profiles(profile, empty_profile) -> InMemoryProfileRepository:
    return InMemoryProfileRepository([profile, empty_profile])
