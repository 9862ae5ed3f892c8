import json

import pytest

from conftest import ScriptedOracle, run
from hireloop.core.exceptions import OracleMalformedResponse
from hireloop.core.question_generator import QuestionGenerator
from hireloop.models.evaluation import RoundType
from hireloop.models.question import QuestionType
from hireloop.prompts.interviewer import DEEP_PROBE_DIRECTIVE


def _mcq_entry(n, **extra):
    entry = {
        "id": n,
        "question": f"Question {n}?",
        "options": ["A", "B", "C", "D"],
        "correctAnswer": n % 4,
        "explanation": "Because.",
        "category": "Logical Reasoning",
    }
    entry.update(extra)
    return entry


def _generate(reply, round_type, profile, directives=None):
    oracle = ScriptedOracle(reply)
    items = run(QuestionGenerator(oracle).generate(round_type, profile, directives))
    return items, oracle


def test_aptitude_list_reply(profile):
    items, oracle = _generate([_mcq_entry(n) for n in range(1, 11)], RoundType.APTITUDE, profile)

    assert len(items) == 10
    assert all(item.type == QuestionType.MCQ for item in items)
    assert items[0].id == "1"
    assert items[0].correct_index == 1
    assert items[0].topic == "Logical Reasoning"
    assert "Generate exactly 10 Aptitude MCQ" in oracle.prompts[0]


def test_wrapped_and_fenced_reply(profile):
    reply = "```json\n" + json.dumps({"questions": [_mcq_entry(n) for n in range(1, 4)]}) + "\n```"

    items, _ = _generate(reply, RoundType.RESUME_DEEP_DIVE, profile)

    assert [item.id for item in items] == ["1", "2", "3"]


def test_technical_items_typed_by_position_when_undeclared(profile):
    entries = [_mcq_entry(n) for n in range(1, 9)]
    entries += [
        {"id": 9, "question": "Explain indexing.", "explanation": "B-trees"},
        {"id": 10, "question": "Explain caching.", "explanation": "TTL"},
    ]

    items, oracle = _generate({"data": entries}, RoundType.TECHNICAL, profile)

    assert [item.type for item in items[:8]] == [QuestionType.MCQ] * 8
    assert items[8].type == QuestionType.SHORT_ANSWER
    assert items[8].rubric_hint == "B-trees"
    assert "Generate exactly 10 technical questions" in oracle.prompts[0]


def test_technical_declared_type_wins(profile):
    entries = [{"id": 1, "type": "short_answer", "question": "Why?"}]

    items, _ = _generate(entries, RoundType.TECHNICAL, profile)

    assert items[0].type == QuestionType.SHORT_ANSWER


def test_coding_round_accepts_single_problem_object(profile):
    reply = {
        "title": "Merge Intervals",
        "problemStatement": "Merge overlapping intervals.",
        "constraints": ["n <= 10^4"],
        "boilerplate": "def merge(intervals):\n    pass",
        "language": "Python",
    }

    items, oracle = _generate(reply, RoundType.CODING, profile)

    assert len(items) == 1
    assert items[0].type == QuestionType.CODING
    assert items[0].title == "Merge Intervals"
    assert items[0].constraints == ["n <= 10^4"]
    assert "Generate exactly ONE" in oracle.prompts[0]


def test_written_prompt_joins_scenario_and_instruction(profile):
    reply = [{"id": 1, "title": "Delay", "scenario": "A release slipped.", "instruction": "Email the client."}]

    items, oracle = _generate(reply, RoundType.WRITTEN_COMMUNICATION, profile)

    assert items[0].type == QuestionType.WRITTEN_TASK
    assert items[0].prompt == "A release slipped.\n\nEmail the client."
    assert "Soft Skills and Communication Expert" in oracle.prompts[0]


def test_duplicate_ids_are_renumbered(profile):
    items, _ = _generate([_mcq_entry(1), _mcq_entry(1)], RoundType.APTITUDE, profile)

    assert [item.id for item in items] == ["1", "1_2"]


def test_directives_reach_the_prompt(profile):
    _, oracle = _generate(
        [_mcq_entry(1)], RoundType.RESUME_DEEP_DIVE, profile, directives=[DEEP_PROBE_DIRECTIVE]
    )

    prompt = oracle.prompts[0]
    assert "Deep-Dive MCQ questions" in prompt
    assert "ADDITIONAL REQUIREMENTS" in prompt
    assert DEEP_PROBE_DIRECTIVE.strip() in prompt
    assert "ledger-service" in prompt


@pytest.mark.parametrize("reply", [
    "no questions today",
    {"questions": []},
    [_mcq_entry(1, correctAnswer=7)],
    [_mcq_entry(1, options=[])],
])
def test_unusable_replies_raise(profile, reply):
    with pytest.raises(OracleMalformedResponse):
        _generate(reply, RoundType.APTITUDE, profile)
