"""
Conversational Interview

Chat-style interview: one question at a time, each answer graded by the
oracle while the Adaptive Difficulty Controller steers the next question.
The gatekeeper runs once, before the third question is asked.

All counters (questions answered, running average) are derived from the
server-side turn list; nothing is taken from the client.
"""

import asyncio
import logging
from typing import Any

from hireloop.core.difficulty import AdaptiveDifficultyController, count_words
from hireloop.core.exceptions import (
    InvalidInput,
    OracleMalformedResponse,
    OutOfSequence,
    ProfileNotFound,
    SessionNotFound,
)
from hireloop.core.gatekeeper import Gatekeeper
from hireloop.core.oracle import parse_oracle_json
from hireloop.core.policy import get_policy
from hireloop.core.scoring import clamp, weighted_conversation_score
from hireloop.models.candidate import CandidateProfile
from hireloop.models.conversation import (
    ConversationAnalysis,
    ConversationSession,
    ConversationState,
    ConversationTurn,
    DifficultyTier,
)
from hireloop.prompts.interviewer import DEEP_PROBE_DIRECTIVE, InterviewerPrompts
from hireloop.prompts.report import ReportPrompts

logger = logging.getLogger(__name__)

# Answered turns after which the gate runs (i.e. before question 3)
GATE_AFTER_TURNS = 2

DEFAULT_RESOURCES = [
    {"title": "GeeksForGeeks Interview Prep", "url": "https://www.geeksforgeeks.org/interview-preparation-for-software-development/"},
    {"title": "LeetCode Patterns", "url": "https://leetcode.com/"},
    {"title": "Behavioral Interview Guide", "url": "https://www.themuse.com/advice/star-interview-method"},
]


class ConversationInterviewer:
    """
    Runs conversational interview sessions.

    Sessions are stored in memory; each has its own lock so answers to the
    same session are processed one at a time.
    """

    def __init__(
        self,
        oracle: Any,
        profiles: Any,
        gatekeeper: Gatekeeper,
        controller: AdaptiveDifficultyController | None = None,
        prompts: InterviewerPrompts | None = None,
        report_prompts: ReportPrompts | None = None,
    ):
        self.oracle = oracle
        self.profiles = profiles
        self.gatekeeper = gatekeeper
        self.controller = controller or AdaptiveDifficultyController()
        self.prompts = prompts or InterviewerPrompts()
        self.report_prompts = report_prompts or ReportPrompts()

        self._sessions: dict[str, ConversationSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    def get_session(self, session_id: str) -> ConversationSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(f"Conversation not found: {session_id}")
        return session

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        self.get_session(session_id)
        return self._locks.setdefault(session_id, asyncio.Lock())

    async def start(self, candidate_id: str) -> ConversationSession:
        """
        Start a conversational interview with a role-specific first question.

        Raises:
            ProfileNotFound: if the candidate is unknown
        """
        profile = await self.profiles.get_profile(candidate_id)
        session = ConversationSession(candidate=profile)
        session.current_question = await self._opening_question(profile)

        self._sessions[session.session_id] = session
        self._locks[session.session_id] = asyncio.Lock()

        logger.info(f"Started conversation {session.session_id} for {candidate_id} ({profile.target_role})")
        return session

    async def _opening_question(self, profile: CandidateProfile) -> str:
        prompt = self.prompts.generate_opening_question_prompt(profile)
        try:
            data = parse_oracle_json(await self.oracle.complete(prompt))
            question = data.get("question")
            if isinstance(question, str) and question.strip():
                return question.strip()
            logger.warning("Opening question missing from oracle reply, using fallback")
        except Exception as e:
            logger.error(f"Opening question generation failed: {type(e).__name__}: {e}")
        return self._get_fallback_opening_question(profile)

    def _get_fallback_opening_question(self, profile: CandidateProfile) -> str:
        projects = profile.evidence()
        if projects and projects[0].name:
            return (
                f"Walk me through {projects[0].name}. What problem did it solve, and which "
                f"technical decisions were yours?"
            )
        return (
            f"Tell me about the project you are most proud of that is relevant to the "
            f"{profile.target_role} role, and the hardest problem you solved in it."
        )

    # =========================================================================
    # TURNS
    # =========================================================================

    async def answer(self, session_id: str, text: str) -> dict[str, Any]:
        """
        Record an answer to the current question and produce the next one.

        Args:
            session_id: Conversation ID
            text: Candidate's answer

        Returns:
            Turn outcome: feedback, score, confidence, next question and flags

        Raises:
            OutOfSequence: conversation has already ended
            InvalidInput: empty answer
            OracleUnavailable / OracleMalformedResponse: grading failed (turn not recorded)
        """
        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            if session.state != ConversationState.ACTIVE:
                raise OutOfSequence(f"Conversation {session_id} is {session.state.value}")

            text = (text or "").strip()
            if not text:
                raise InvalidInput("No answer provided")

            question_count = session.question_count + 1

            if question_count == GATE_AFTER_TURNS and session.gatekeeper_verdict is None:
                await self._run_gate(session)
                if session.state == ConversationState.SCREENED_OUT:
                    return self._screen_out(session, text)

            deep_probe = session.deep_probe_directive if question_count == GATE_AFTER_TURNS else None

            decision = self.controller.decide(
                question_count=question_count,
                running_average=session.running_average,
                word_count=count_words(text),
            )
            prompt = self.prompts.generate_turn_prompt(
                session=session,
                answer=text,
                difficulty_instructions=self.controller.render_instructions(decision),
                question_count=question_count,
                running_average=decision.running_average,
                min_questions=self.controller.min_questions,
                deep_probe_directive=deep_probe,
            )

            data = parse_oracle_json(await self.oracle.complete(prompt))
            score, confidence, feedback, next_question, oracle_finished = self._parse_turn(data)

            is_finished = oracle_finished and decision.may_finish
            if not is_finished and not next_question:
                raise OracleMalformedResponse("Turn reply has no next question", str(data))

            # Commit
            session.turns.append(ConversationTurn(
                question=session.current_question or "",
                answer=text,
                score=score,
                confidence=confidence,
                feedback=feedback,
                is_probe=session.current_question_is_probe,
                tier=session.current_question_tier,
            ))

            if is_finished:
                session.state = ConversationState.FINISHED
                session.current_question = None
                logger.info(f"Conversation {session_id} finished after {question_count} questions")
            else:
                session.current_question = next_question
                session.current_question_is_probe = decision.is_probe
                session.current_question_tier = decision.tier

            return {
                "feedback": feedback,
                "score": score,
                "confidence": confidence,
                "next_question": None if is_finished else next_question,
                "is_probe": decision.is_probe and not is_finished,
                "tier": decision.tier.value,
                "is_finished": is_finished,
                "is_screened_out": False,
                "question_count": question_count,
            }

    async def _run_gate(self, session: ConversationSession) -> None:
        evidence: CandidateProfile = session.candidate
        try:
            evidence = await self.profiles.get_profile(session.candidate.candidate_id)
        except ProfileNotFound:
            logger.warning(f"Conversation {session.session_id}: profile gone at gate, using snapshot")

        verdict = await self.gatekeeper.audit(evidence, session.target_role)
        session.gatekeeper_verdict = verdict

        if verdict.verified:
            session.deep_probe_directive = DEEP_PROBE_DIRECTIVE
        else:
            session.state = ConversationState.SCREENED_OUT
            session.rejection_reason = verdict.reason
            logger.info(f"Conversation {session.session_id} screened out: {verdict.reason}")

    def _screen_out(self, session: ConversationSession, text: str) -> dict[str, Any]:
        verdict = session.gatekeeper_verdict
        feedback = f"Gatekeeper halted interview: {verdict.reason}"
        session.turns.append(ConversationTurn(
            question=session.current_question or "",
            answer=text,
            score=0.0,
            confidence=0.0,
            feedback=feedback,
            is_probe=session.current_question_is_probe,
            tier=session.current_question_tier,
        ))
        session.current_question = None

        return {
            "feedback": feedback,
            "score": 0.0,
            "confidence": 0.0,
            "next_question": None,
            "is_probe": False,
            "tier": DifficultyTier.STANDARD.value,
            "is_finished": True,
            "is_screened_out": True,
            "question_count": session.question_count,
            "audit_reason": verdict.reason,
            "match_score": verdict.match_score,
        }

    def _parse_turn(self, data: dict[str, Any]) -> tuple[float, float, str, str | None, bool]:
        try:
            score = clamp(float(data.get("score", 0)), 0, 10)
            confidence = clamp(float(data.get("confidence", 0)), 0, 10)
        except (TypeError, ValueError) as e:
            raise OracleMalformedResponse("Turn grade is not numeric", str(data)) from e

        feedback = str(data.get("feedback") or "")
        next_question = data.get("nextQuestion") or data.get("next_question")
        next_question = next_question.strip() if isinstance(next_question, str) else None
        return score, confidence, feedback, next_question, bool(data.get("isFinished", False))

    # =========================================================================
    # ANALYSIS
    # =========================================================================

    async def analyze(self, session_id: str) -> ConversationAnalysis:
        """
        Weighted analysis of the transcript (technical 40, communication 30, confidence 30).

        Falls back to scores derived from per-turn grades if the oracle fails.

        Raises:
            InvalidInput: no answered turns yet
        """
        session = self.get_session(session_id)
        if not session.turns:
            raise InvalidInput(f"Conversation {session_id} has no answers to analyze")

        prompt = self.report_prompts.generate_conversation_analysis_prompt(session)
        try:
            data = parse_oracle_json(await self.oracle.complete(prompt))
            technical = clamp(float(data["technicalScore"]))
            communication = clamp(float(data["communicationScore"]))
            confidence = clamp(float(data["confidenceScore"]))
        except Exception as e:
            logger.warning(f"Conversation analysis unavailable, deriving from turns: {type(e).__name__}: {e}")
            return self._get_fallback_analysis(session)

        return ConversationAnalysis(
            session_id=session.session_id,
            technical_score=technical,
            communication_score=communication,
            confidence_score=confidence,
            overall_score=weighted_conversation_score(technical, communication, confidence),
            strengths=[str(s) for s in data.get("strengths") or []],
            improvements=[str(s) for s in data.get("improvements") or []],
            resources=[
                {"title": str(r.get("title", "")), "url": str(r.get("url", ""))}
                for r in data.get("resources") or []
                if isinstance(r, dict)
            ],
            summary=str(data.get("summary") or ""),
        )

    def _get_fallback_analysis(self, session: ConversationSession) -> ConversationAnalysis:
        policy = get_policy("conversation_analysis")
        turns = session.turns
        technical = clamp(sum(t.score for t in turns) / len(turns) * 10)
        confidence = clamp(sum(t.confidence for t in turns) / len(turns) * 10)
        communication = policy.default_score

        return ConversationAnalysis(
            session_id=session.session_id,
            technical_score=technical,
            communication_score=communication,
            confidence_score=confidence,
            overall_score=weighted_conversation_score(technical, communication, confidence),
            strengths=[f"Answered {len(turns)} questions for the {session.target_role} role"],
            improvements=[
                "Focus on deepening domain-specific knowledge",
                "Give concrete examples with specific tools and steps",
            ],
            resources=list(DEFAULT_RESOURCES),
            summary=policy.default_feedback,
            used_default=True,
        )
