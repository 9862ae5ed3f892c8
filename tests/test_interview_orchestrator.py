import asyncio

import pytest

from conftest import (
    CODE_REVIEW,
    DEEP_DIVE_GENERATION,
    GATEKEEPER,
    MCQ_SUMMARY,
    NARRATIVE,
    WRITTEN_GRADING,
    RoutingOracle,
    answers_correct,
    coding_set,
    mcq_set,
    run,
    written_set,
)
from hireloop.core.evaluation_engine import EvaluationEngine
from hireloop.core.exceptions import (
    InvalidInput,
    OracleUnavailable,
    OutOfSequence,
    QuestionsNotReady,
    StateTransitionError,
)
from hireloop.core.gatekeeper import Gatekeeper
from hireloop.core.interview_orchestrator import InterviewOrchestrator
from hireloop.core.question_generator import QuestionGenerator
from hireloop.core.report_generator import ReportComposer
from hireloop.models.interview import InterviewState, SessionStatus
from hireloop.models.report import HiringVerdict

VERIFIED = {"verified": True, "match_score": 72, "reason": "Projects match the role."}
REJECTED = {"verified": False, "match_score": 10, "reason": "No backend work in the projects."}

DEEP_DIVE_QUESTIONS = {
    "questions": [
        {
            "id": i,
            "question": f"How did ledger-service use item {i}?",
            "options": ["a", "b", "c", "d"],
            "correctAnswer": 1,
        }
        for i in range(1, 11)
    ]
}


def _oracle(gate=VERIFIED, coding_score=85, written_score=75, **extra):
    routes = {
        GATEKEEPER: gate,
        MCQ_SUMMARY: {"summary": "Fine."},
        CODE_REVIEW: {"score": coding_score, "feedback": ["a", "b", "c"],
                      "complexity": {"time": "O(n)", "space": "O(1)"}},
        WRITTEN_GRADING: {"score": written_score, "feedback": "Clear."},
        NARRATIVE: {"summary": "Strong candidate.", "recommendation": "Keep going."},
        DEEP_DIVE_GENERATION: DEEP_DIVE_QUESTIONS,
    }
    routes.update(extra)
    return RoutingOracle(routes)


def _orchestrator(profiles, oracle):
    return InterviewOrchestrator(
        profiles=profiles,
        evaluation_engine=EvaluationEngine(oracle),
        gatekeeper=Gatekeeper(oracle, min_match=30),
        question_generator=QuestionGenerator(oracle),
        report_composer=ReportComposer(oracle),
    )


async def _mcq_round(orchestrator, session_id, round_number, correct):
    questions = mcq_set(10, prefix=f"r{round_number}_")
    await orchestrator.set_round_questions(session_id, round_number, questions)
    return await orchestrator.submit_round_answers(
        session_id, round_number, answers_correct(questions, correct)
    )


async def _through_round_two(orchestrator, candidate_id="cand-1", r1=8, r2=7):
    session = await orchestrator.create_session(candidate_id)
    await _mcq_round(orchestrator, session.session_id, 1, r1)
    await _mcq_round(orchestrator, session.session_id, 2, r2)
    return session


async def _finish(orchestrator, session_id, r3=9):
    await _mcq_round(orchestrator, session_id, 3, r3)
    await orchestrator.set_round_questions(session_id, 4, coding_set())
    await orchestrator.submit_round_answers(session_id, 4, {"c1": "def solve(): pass"})
    written = written_set()
    await orchestrator.set_round_questions(session_id, 5, written)
    await orchestrator.submit_round_answers(session_id, 5, {q.id: "Dear team" for q in written})


# ============================================================================
# HAPPY PATH
# ============================================================================

def test_full_pipeline_completes_with_plain_mean(profiles):
    oracle = _oracle()
    orchestrator = _orchestrator(profiles, oracle)

    async def scenario():
        session = await _through_round_two(orchestrator)
        await _finish(orchestrator, session.session_id)
        return session

    session = run(scenario())

    # 80, 70, 90, 85, 75 -> 80
    assert session.state == InterviewState.COMPLETED
    assert session.status == SessionStatus.COMPLETED
    assert session.round_scores() == [80.0, 70.0, 90.0, 85.0, 75.0]
    assert session.final_aggregate.headline_score == 80
    assert session.final_aggregate.verdict == HiringVerdict.HIRE
    assert session.final_aggregate.matrix.problem_solving == 8.5
    assert session.final_aggregate.matrix.cultural == 7.0
    assert session.completed_at is not None
    assert len(oracle.prompts_matching(GATEKEEPER)) == 1


def test_headline_rounds_half_up(profiles):
    orchestrator = _orchestrator(profiles, _oracle(coding_score=82.5, written_score=80))

    async def scenario():
        session = await _through_round_two(orchestrator, r1=5, r2=6)
        await _finish(orchestrator, session.session_id, r3=7)
        return session

    session = run(scenario())

    # (50 + 60 + 70 + 82.5 + 80) / 5 = 68.5
    assert session.headline_score == 69
    assert session.final_aggregate.verdict == HiringVerdict.BORDERLINE


def test_failed_rounds_still_advance(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        result = await _mcq_round(orchestrator, session.session_id, 1, 2)
        return session, result

    session, result = run(scenario())

    assert result.passed is False
    assert session.state == InterviewState.ROUND_2_ACTIVE
    assert session.current_round == 2


# ============================================================================
# SEQUENCING
# ============================================================================

def test_out_of_sequence_submissions_are_rejected(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        await orchestrator.set_round_questions(session.session_id, 1, mcq_set(10))

        with pytest.raises(OutOfSequence) as skipped:
            await orchestrator.submit_round_answers(session.session_id, 2, {})
        assert skipped.value.expected_round == 1
        assert skipped.value.received_round == 2

        await orchestrator.submit_round_answers(session.session_id, 1, {})

        with pytest.raises(OutOfSequence):
            await orchestrator.submit_round_answers(session.session_id, 1, {})
        with pytest.raises(OutOfSequence):
            await orchestrator.set_round_questions(session.session_id, 1, mcq_set(10))
        return session

    session = run(scenario())

    assert session.current_round == 2
    assert session.get_result(1).score == 0.0


def test_answers_before_questions_are_rejected(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        with pytest.raises(QuestionsNotReady):
            await orchestrator.submit_round_answers(session.session_id, 1, {"q1": 0})
        return session

    session = run(scenario())
    assert session.resulted_rounds == 0


def test_question_set_must_match_round_type(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        with pytest.raises(InvalidInput):
            await orchestrator.set_round_questions(session.session_id, 1, coding_set())
        with pytest.raises(InvalidInput):
            await orchestrator.set_round_questions(session.session_id, 1, [])

    run(scenario())


def test_coding_and_written_sets_are_size_bounded(profiles):
    orchestrator = _orchestrator(profiles, _oracle())
    second_problem = coding_set()[0].model_copy(update={"id": "c2", "title": "Three Sum"})

    async def scenario():
        session = await _through_round_two(orchestrator)
        await _mcq_round(orchestrator, session.session_id, 3, 9)

        with pytest.raises(InvalidInput):
            await orchestrator.set_round_questions(
                session.session_id, 4, coding_set() + [second_problem]
            )
        with pytest.raises(InvalidInput):
            await orchestrator.set_round_questions(session.session_id, 4, [])
        await orchestrator.set_round_questions(session.session_id, 4, coding_set())
        await orchestrator.submit_round_answers(session.session_id, 4, {"c1": "def solve(): pass"})

        with pytest.raises(InvalidInput):
            await orchestrator.set_round_questions(session.session_id, 5, written_set(6))
        accepted = await orchestrator.set_round_questions(session.session_id, 5, written_set(5))
        return session, accepted

    session, accepted = run(scenario())

    assert len(accepted) == 5
    assert session.current_round == 5
    assert session.state == InterviewState.ROUND_5_ACTIVE


def test_concurrent_duplicate_submission_is_serialized(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        await orchestrator.set_round_questions(session.session_id, 1, mcq_set(10))
        results = await asyncio.gather(
            orchestrator.submit_round_answers(session.session_id, 1, {}),
            orchestrator.submit_round_answers(session.session_id, 1, {}),
            return_exceptions=True,
        )
        return session, results

    session, results = run(scenario())

    assert sum(isinstance(r, OutOfSequence) for r in results) == 1
    assert session.resulted_rounds == 1


def test_evaluator_failure_does_not_mutate_session(profiles):
    oracle = _oracle()
    orchestrator = _orchestrator(profiles, oracle)

    async def scenario():
        session = await _through_round_two(orchestrator)
        await _mcq_round(orchestrator, session.session_id, 3, 9)
        await orchestrator.set_round_questions(session.session_id, 4, coding_set())

        oracle.routes[CODE_REVIEW] = OracleUnavailable("down")
        with pytest.raises(OracleUnavailable):
            await orchestrator.submit_round_answers(session.session_id, 4, {"c1": "x = 1"})

        assert session.state == InterviewState.ROUND_4_ACTIVE
        assert session.current_round == 4
        assert session.get_result(4) is None

        oracle.routes[CODE_REVIEW] = {"score": 61}
        return await orchestrator.submit_round_answers(session.session_id, 4, {"c1": "x = 1"})

    result = run(scenario())
    assert result.score == 61.0


def test_illegal_transition_raises(profiles):
    orchestrator = _orchestrator(profiles, _oracle())
    session = run(orchestrator.create_session("cand-1"))

    with pytest.raises(StateTransitionError):
        orchestrator.transition_state(session, InterviewState.COMPLETED)


# ============================================================================
# GATE
# ============================================================================

def test_gatekeeper_rejection_screens_out(profiles):
    oracle = _oracle(gate=REJECTED)
    orchestrator = _orchestrator(profiles, oracle)

    async def scenario():
        session = await _through_round_two(orchestrator)
        with pytest.raises(OutOfSequence):
            await orchestrator.generate_round_questions(session.session_id, 3)
        with pytest.raises(OutOfSequence):
            await orchestrator.submit_round_answers(session.session_id, 3, {})
        report = await orchestrator.compose_report(session.session_id)
        return session, report

    session, report = run(scenario())

    assert session.state == InterviewState.SCREENED_OUT
    assert session.headline_score == 0
    assert session.rejection_reason == REJECTED["reason"]
    assert session.round_results[2:] == [None, None, None]
    assert session.final_aggregate is None
    assert oracle.prompts_matching(DEEP_DIVE_GENERATION) == []
    assert oracle.prompts_matching(NARRATIVE) == []

    assert report.screened_out is True
    assert report.headline_score == 0
    assert report.verdict == HiringVerdict.NO_HIRE
    assert report.rejection_reason == REJECTED["reason"]


def test_empty_evidence_screens_out_without_audit_call(profiles):
    oracle = _oracle()
    orchestrator = _orchestrator(profiles, oracle)

    session = run(_through_round_two(orchestrator, candidate_id="cand-empty"))

    assert session.state == InterviewState.SCREENED_OUT
    assert session.gatekeeper_verdict.match_score == 0
    assert oracle.prompts_matching(GATEKEEPER) == []


def test_gatekeeper_outage_lets_candidate_through(profiles):
    orchestrator = _orchestrator(profiles, _oracle(gate=OracleUnavailable("down")))

    session = run(_through_round_two(orchestrator))

    assert session.state == InterviewState.ROUND_3_ACTIVE
    assert session.gatekeeper_verdict.verified is True
    assert session.gatekeeper_verdict.bypassed is True


def test_verified_gate_adds_deep_probe_to_round_three_generation(profiles):
    oracle = _oracle()
    orchestrator = _orchestrator(profiles, oracle)

    async def scenario():
        session = await _through_round_two(orchestrator)
        items = await orchestrator.generate_round_questions(session.session_id, 3)
        return session, items

    session, items = run(scenario())

    assert len(items) == 10
    assert session.question_sets[3] == items
    prompt = oracle.prompts_matching(DEEP_DIVE_GENERATION)[0]
    assert "CRITICAL DEEP-PROBE REQUIREMENT" in prompt
    assert "at least 3 specific variables, libraries, or functions" in prompt


def test_gate_falls_back_to_snapshot_when_profile_disappears(profiles):
    oracle = _oracle()
    orchestrator = _orchestrator(profiles, oracle)

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        profiles._profiles.pop("cand-1")
        await _mcq_round(orchestrator, session.session_id, 1, 8)
        await _mcq_round(orchestrator, session.session_id, 2, 8)
        return session

    session = run(scenario())

    assert session.state == InterviewState.ROUND_3_ACTIVE
    assert "ledger-service" in oracle.prompts_matching(GATEKEEPER)[0]


# ============================================================================
# STATUS & REPORT
# ============================================================================

def test_status_reports_progress(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        await _mcq_round(orchestrator, session.session_id, 1, 6)
        return orchestrator.get_status(session.session_id)

    status = run(scenario())

    assert status["state"] == "round_2_active"
    assert status["status"] == "in_progress"
    assert status["current_round"] == 2
    assert status["questions_ready"] is False
    assert status["round_scores"] == [60.0, None, None, None, None]


def test_report_requires_finished_session(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await orchestrator.create_session("cand-1")
        with pytest.raises(OutOfSequence):
            await orchestrator.compose_report(session.session_id)

    run(scenario())


def test_completed_report_matches_aggregate(profiles):
    orchestrator = _orchestrator(profiles, _oracle())

    async def scenario():
        session = await _through_round_two(orchestrator)
        await _finish(orchestrator, session.session_id)
        return session, await orchestrator.compose_report(session.session_id)

    session, report = run(scenario())

    assert report.headline_score == session.final_aggregate.headline_score
    assert report.verdict == session.final_aggregate.verdict
    assert report.summary == "Strong candidate."
    assert report.selling_points[0].startswith("Scored 90% in Resume Deep-Dive")
