"""
Interview Orchestrator - State machine for the five-round pipeline.

This is the central coordinator of a pipeline session. It validates round
sequencing, dispatches submissions to evaluators, runs the one-time
gatekeeper audit between rounds 2 and 3, and computes the final aggregate.

Every mutation of a session happens after all fallible awaits for that
operation have completed, so a failed evaluation leaves the session exactly
as it was.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any

from hireloop.core.evaluation_engine import EvaluationContext, EvaluationEngine
from hireloop.core.exceptions import (
    InvalidInput,
    OutOfSequence,
    ProfileNotFound,
    QuestionsNotReady,
    SessionNotFound,
    StateTransitionError,
)
from hireloop.core.gatekeeper import Gatekeeper
from hireloop.core.question_generator import QuestionGenerator
from hireloop.core.scoring import build_skill_matrix, final_round_average
from hireloop.models.candidate import CandidateProfile
from hireloop.models.evaluation import GatekeeperVerdict, RoundResult, RoundType
from hireloop.models.interview import (
    GATE_AFTER_ROUND,
    TOTAL_ROUNDS,
    InterviewSession,
    InterviewState,
)
from hireloop.models.question import QuestionItem
from hireloop.models.report import CandidateReport, FinalAggregate, HiringVerdict
from hireloop.prompts.interviewer import DEEP_PROBE_DIRECTIVE

logger = logging.getLogger(__name__)


class InterviewOrchestrator:
    """
    Manages the pipeline lifecycle using a state machine pattern.

    States:
        ROUND_1 → ROUND_2 → GATE_CHECK → ROUND_3 → ROUND_4 → ROUND_5 → COMPLETED
                                 ↓
                           SCREENED_OUT

    The orchestrator coordinates between:
    - Profile repository (candidate snapshot and gate evidence)
    - Question generator
    - Evaluation engine
    - Gatekeeper
    - Report composer
    """

    VALID_TRANSITIONS: dict[InterviewState, list[InterviewState]] = {
        InterviewState.ROUND_1_ACTIVE: [InterviewState.ROUND_2_ACTIVE],
        InterviewState.ROUND_2_ACTIVE: [InterviewState.GATE_CHECK],
        InterviewState.GATE_CHECK: [InterviewState.ROUND_3_ACTIVE, InterviewState.SCREENED_OUT],
        InterviewState.ROUND_3_ACTIVE: [InterviewState.ROUND_4_ACTIVE],
        InterviewState.ROUND_4_ACTIVE: [InterviewState.ROUND_5_ACTIVE],
        InterviewState.ROUND_5_ACTIVE: [InterviewState.COMPLETED],
        InterviewState.COMPLETED: [],  # Terminal state
        InterviewState.SCREENED_OUT: [],  # Terminal state
    }

    def __init__(
        self,
        profiles: Any,
        evaluation_engine: EvaluationEngine,
        gatekeeper: Gatekeeper,
        question_generator: QuestionGenerator | None = None,
        report_composer: Any = None,  # ReportComposer
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            profiles: Profile repository exposing ``async get_profile(candidate_id)``
            evaluation_engine: Round evaluator dispatch
            gatekeeper: Authenticity audit
            question_generator: Oracle-backed question generation
            report_composer: Final report builder
        """
        self.profiles = profiles
        self.evaluation_engine = evaluation_engine
        self.gatekeeper = gatekeeper
        self.question_generator = question_generator
        self.report_composer = report_composer

        # Session storage (in-memory)
        self._sessions: dict[str, InterviewSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._reports: dict[str, CandidateReport] = {}

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    async def create_session(self, candidate_id: str) -> InterviewSession:
        """
        Create a new pipeline session for a candidate.

        Raises:
            ProfileNotFound: if the candidate is unknown
        """
        profile = await self.profiles.get_profile(candidate_id)
        session = InterviewSession(candidate=profile)

        self._sessions[session.session_id] = session
        self._locks[session.session_id] = asyncio.Lock()

        logger.info(
            f"Created pipeline session {session.session_id} for candidate {candidate_id} "
            f"({profile.target_role})"
        )
        return session

    def get_session(self, session_id: str) -> InterviewSession:
        """
        Get a session by ID.

        Raises:
            SessionNotFound: if the id is unknown
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(f"Session not found: {session_id}")
        return session

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        self.get_session(session_id)
        return self._locks.setdefault(session_id, asyncio.Lock())

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def transition_state(self, session: InterviewSession, new_state: InterviewState) -> None:
        """
        Move a session to a new state.

        Raises:
            StateTransitionError: If transition is invalid
        """
        old_state = session.state
        valid_next_states = self.VALID_TRANSITIONS.get(old_state, [])
        if new_state not in valid_next_states:
            raise StateTransitionError(
                f"Invalid transition from {old_state.value} to {new_state.value}. "
                f"Valid transitions: {[s.value for s in valid_next_states]}"
            )

        session.state = new_state
        if new_state.is_terminal:
            session.completed_at = datetime.utcnow()

        logger.info(f"Session {session.session_id}: {old_state.value} → {new_state.value}")

    def _check_round(self, session: InterviewSession, round_number: int) -> None:
        """Reject operations on anything but the current, unresulted round."""
        if session.state.is_terminal:
            raise OutOfSequence(
                f"Session {session.session_id} is {session.state.value}; no further rounds accepted",
                expected_round=None,
                received_round=round_number,
            )
        if not 1 <= round_number <= TOTAL_ROUNDS:
            raise OutOfSequence(
                f"Round {round_number} does not exist",
                expected_round=session.current_round,
                received_round=round_number,
            )
        if round_number != session.current_round or session.get_result(round_number) is not None:
            raise OutOfSequence(
                f"Expected round {session.current_round}, got round {round_number}",
                expected_round=session.current_round,
                received_round=round_number,
            )

    # =========================================================================
    # QUESTIONS
    # =========================================================================

    async def set_round_questions(
        self,
        session_id: str,
        round_number: int,
        items: list[QuestionItem],
    ) -> list[QuestionItem]:
        """
        Attach a question set to the current round.

        Raises:
            OutOfSequence: round is not the current one
            InvalidInput: set is empty, too large, has duplicate ids, or wrong item types
        """
        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            self._check_round(session, round_number)
            self._attach(session, round_number, items)
            return session.question_sets[round_number]

    async def generate_round_questions(self, session_id: str, round_number: int) -> list[QuestionItem]:
        """
        Generate and attach the current round's question set.

        Round 3 generation receives the deep-probe directive set by the gate.

        Raises:
            OutOfSequence: round is not the current one
            OracleUnavailable / OracleMalformedResponse: generation failed
        """
        if self.question_generator is None:
            raise RuntimeError("No question generator configured")

        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            self._check_round(session, round_number)

            round_type = RoundType.for_round(round_number)
            directives = session.generation_directives.get(round_number, [])
            items = await self.question_generator.generate(round_type, session.candidate, directives)

            self._attach(session, round_number, items)
            return session.question_sets[round_number]

    def _attach(self, session: InterviewSession, round_number: int, items: list[QuestionItem]) -> None:
        round_type = RoundType.for_round(round_number)
        if not items:
            raise InvalidInput(f"Round {round_number} needs at least one question")

        ids = [item.id for item in items]
        if len(set(ids)) != len(ids):
            raise InvalidInput(f"Round {round_number} question ids must be unique")

        wrong = [item.id for item in items if item.type not in round_type.item_types]
        if wrong:
            raise InvalidInput(
                f"{round_type.display_name} round does not accept items {wrong}"
            )

        limit = round_type.max_items
        if limit is not None and len(items) > limit:
            raise InvalidInput(
                f"{round_type.display_name} round takes at most {limit} item(s), got {len(items)}"
            )

        session.question_sets[round_number] = list(items)
        logger.info(f"Session {session.session_id}: attached {len(items)} questions to round {round_number}")

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    async def submit_round_answers(
        self,
        session_id: str,
        round_number: int,
        answers: dict[str, Any],
    ) -> RoundResult:
        """
        Evaluate a round submission and advance the session.

        Args:
            session_id: Session ID
            round_number: Round the answers belong to (must be current)
            answers: Raw answers keyed by question id

        Returns:
            The stored RoundResult

        Raises:
            OutOfSequence: wrong round, resulted round, or terminal session
            QuestionsNotReady: no questions attached for the round
            OracleUnavailable / OracleMalformedResponse: evaluator failed
        """
        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            self._check_round(session, round_number)

            questions = session.question_sets.get(round_number)
            if not questions:
                raise QuestionsNotReady(f"Round {round_number} has no questions attached")

            round_type = RoundType.for_round(round_number)
            context = EvaluationContext(
                target_role=session.target_role,
                candidate_name=session.candidate.full_name,
            )

            try:
                result = await self.evaluation_engine.evaluate(round_type, questions, answers, context)
            except Exception as e:
                logger.error(
                    f"Session {session_id}: round {round_number} evaluation failed: "
                    f"{type(e).__name__}: {e}"
                )
                raise

            verdict = None
            if round_number == GATE_AFTER_ROUND and session.gatekeeper_verdict is None:
                verdict = await self._audit(session)

            # Commit
            self._commit(session, result, verdict)
            return result

    async def _audit(self, session: InterviewSession) -> GatekeeperVerdict:
        """Run the gatekeeper on fresh evidence, falling back to the session snapshot."""
        evidence: CandidateProfile = session.candidate
        try:
            evidence = await self.profiles.get_profile(session.candidate.candidate_id)
        except ProfileNotFound:
            logger.warning(
                f"Session {session.session_id}: profile gone at gate, auditing session snapshot"
            )
        return await self.gatekeeper.audit(evidence, session.target_role)

    def _commit(
        self,
        session: InterviewSession,
        result: RoundResult,
        verdict: GatekeeperVerdict | None,
    ) -> None:
        round_number = result.round_number
        session.round_results[round_number - 1] = result
        logger.info(
            f"Session {session.session_id}: round {round_number} scored {result.score:.1f} "
            f"({'passed' if result.passed else 'failed'})"
        )

        if round_number == GATE_AFTER_ROUND:
            self.transition_state(session, InterviewState.GATE_CHECK)
            self._apply_gate(session, verdict)
        elif round_number == TOTAL_ROUNDS:
            self._finalize(session)
        else:
            self.transition_state(session, InterviewState.for_round(round_number + 1))

    def _apply_gate(self, session: InterviewSession, verdict: GatekeeperVerdict) -> None:
        session.gatekeeper_verdict = verdict

        if not verdict.verified:
            session.headline_score = 0
            session.rejection_reason = verdict.reason
            self.transition_state(session, InterviewState.SCREENED_OUT)
            logger.info(f"Session {session.session_id}: screened out by gatekeeper: {verdict.reason}")
            return

        session.generation_directives.setdefault(GATE_AFTER_ROUND + 1, []).append(DEEP_PROBE_DIRECTIVE)
        self.transition_state(session, InterviewState.for_round(GATE_AFTER_ROUND + 1))

    def _finalize(self, session: InterviewSession) -> None:
        scores = session.round_scores()
        headline = final_round_average(scores)
        session.final_aggregate = FinalAggregate(
            round_scores=scores,
            headline_score=headline,
            verdict=HiringVerdict.from_score(headline),
            matrix=build_skill_matrix(scores),
        )
        session.headline_score = headline
        self.transition_state(session, InterviewState.COMPLETED)
        logger.info(
            f"Session {session.session_id}: completed with {headline} "
            f"({session.final_aggregate.verdict.value})"
        )

    # =========================================================================
    # STATUS & REPORT
    # =========================================================================

    def get_status(self, session_id: str) -> dict[str, Any]:
        """Snapshot of a session's progress."""
        session = self.get_session(session_id)
        aggregate = session.final_aggregate

        return {
            "session_id": session.session_id,
            "candidate_id": session.candidate.candidate_id,
            "target_role": session.target_role,
            "state": session.state.value,
            "status": session.status.value,
            "current_round": None if session.state.is_terminal else session.current_round,
            "current_round_type": None if session.state.is_terminal else session.current_round_type.value,
            "questions_ready": (
                not session.state.is_terminal
                and bool(session.question_sets.get(session.current_round))
            ),
            "round_scores": [r.score if r else None for r in session.round_results],
            "gatekeeper": session.gatekeeper_verdict.model_dump(mode="json") if session.gatekeeper_verdict else None,
            "headline_score": session.headline_score,
            "verdict": aggregate.verdict.value if aggregate else None,
            "rejection_reason": session.rejection_reason,
        }

    async def compose_report(self, session_id: str) -> CandidateReport:
        """
        Build (once) and return the final report of a finished session.

        Raises:
            OutOfSequence: the session has not reached a terminal state
        """
        if self.report_composer is None:
            raise RuntimeError("No report composer configured")

        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            if not session.state.is_terminal:
                raise OutOfSequence(
                    f"Report unavailable: session {session_id} is still {session.state.value}",
                    expected_round=session.current_round,
                )

            if session_id in self._reports:
                return self._reports[session_id]

            if session.state == InterviewState.SCREENED_OUT:
                report = self.report_composer.compose_screened_out(session)
            else:
                report = await self.report_composer.compose(session)

            self._reports[session_id] = report
            return report
