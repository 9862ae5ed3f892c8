"""
Report Composer for HireLoop

Turns a finished pipeline session into a CandidateReport:
- Round scores, headline score and verdict (copied from the final aggregate)
- Skill matrix
- Selling points ranked by round score
- Oracle-written summary and recommendation, with fixed fallback text

Numeric fields never come from the oracle, so a narrative failure can only
degrade wording, never the verdict.
"""

import logging
from typing import Any

from hireloop.core.oracle import parse_oracle_json
from hireloop.core.policy import get_policy
from hireloop.models.evaluation import RoundType
from hireloop.models.interview import InterviewSession
from hireloop.models.report import CandidateReport, FinalAggregate, HiringVerdict
from hireloop.prompts.report import ReportPrompts

logger = logging.getLogger(__name__)

SELLING_POINT_COUNT = 3

SELLING_POINT_PHRASES = {
    RoundType.APTITUDE: "demonstrating a strong logical foundation",
    RoundType.TECHNICAL: "validating domain-specific technical proficiency",
    RoundType.RESUME_DEEP_DIVE: "backing up claimed project experience under questioning",
    RoundType.CODING: "turning a practical problem into working code",
    RoundType.WRITTEN_COMMUNICATION: "communicating clearly in writing",
}


def rank_rounds(round_scores: list[float]) -> list[int]:
    """Round numbers ordered by score, highest first. Ties keep round order."""
    return sorted(
        range(1, len(round_scores) + 1),
        key=lambda n: round_scores[n - 1],
        reverse=True,
    )


class ReportComposer:
    """
    Generates final candidate reports.

    The oracle is optional; without it every report uses fallback narrative.
    """

    def __init__(self, oracle: Any = None, prompts: ReportPrompts | None = None):
        self.oracle = oracle
        self.prompts = prompts or ReportPrompts()

    async def compose(self, session: InterviewSession) -> CandidateReport:
        """
        Compose the report of a completed session.

        Args:
            session: Session with a final aggregate

        Returns:
            CandidateReport
        """
        aggregate = session.final_aggregate
        if aggregate is None:
            raise ValueError(f"Session {session.session_id} has no final aggregate")

        name = session.candidate.full_name
        role = session.target_role

        summary, recommendation, is_fallback = await self._narrative(name, role, aggregate)

        return CandidateReport(
            session_id=session.session_id,
            candidate_name=name,
            target_role=role,
            round_scores=self._round_scores(session),
            headline_score=aggregate.headline_score,
            verdict=aggregate.verdict,
            matrix=aggregate.matrix,
            summary=summary,
            recommendation=recommendation,
            selling_points=self._selling_points(aggregate.round_scores),
            round_feedback=self._round_feedback(session),
            narrative_is_fallback=is_fallback,
        )

    def compose_screened_out(self, session: InterviewSession) -> CandidateReport:
        """Compose the rejection report of a session stopped by the gatekeeper."""
        name = session.candidate.full_name
        role = session.target_role
        reason = session.rejection_reason or "Project evidence did not match the role."

        return CandidateReport(
            session_id=session.session_id,
            candidate_name=name,
            target_role=role,
            round_scores=self._round_scores(session),
            headline_score=0,
            verdict=HiringVerdict.NO_HIRE,
            screened_out=True,
            rejection_reason=reason,
            summary=f"{name} was screened out before the resume deep-dive: {reason}",
            recommendation=(
                f"Build and document projects that demonstrate the core skills of the "
                f"{role} role before reapplying."
            ),
            round_feedback=self._round_feedback(session),
        )

    # =========================================================================
    # NARRATIVE
    # =========================================================================

    async def _narrative(
        self,
        name: str,
        role: str,
        aggregate: FinalAggregate,
    ) -> tuple[str, str, bool]:
        """Summary and recommendation from the oracle, or the fixed fallback."""
        if self.oracle is None:
            return (*self._get_fallback_narrative(name, role, aggregate), True)

        prompt = self.prompts.generate_narrative_prompt(name, role, aggregate)
        try:
            data = parse_oracle_json(await self.oracle.complete(prompt))
        except Exception as e:
            logger.warning(f"Report narrative unavailable, using fallback: {type(e).__name__}: {e}")
            return (*self._get_fallback_narrative(name, role, aggregate), True)

        summary = data.get("summary")
        recommendation = data.get("recommendation")
        if not isinstance(summary, str) or not isinstance(recommendation, str):
            logger.warning("Report narrative missing fields, using fallback")
            return (*self._get_fallback_narrative(name, role, aggregate), True)

        return summary, recommendation, False

    def _get_fallback_narrative(self, name: str, role: str, aggregate: FinalAggregate) -> tuple[str, str]:
        logger.info(get_policy("report_narrative").default_feedback)
        summary = (
            f"{name} completed all 5 rounds targeting the {role} role with an overall "
            f"score of {aggregate.headline_score}% ({aggregate.verdict.value})."
        )
        weakest = RoundType.for_round(rank_rounds(aggregate.round_scores)[-1])
        recommendation = (
            f"Focus on strengthening the {weakest.display_name} area where the score was lowest. "
            f"Continue practicing {role}-specific challenges."
        )
        return summary, recommendation

    # =========================================================================
    # DERIVED FIELDS
    # =========================================================================

    def _selling_points(self, round_scores: list[float]) -> list[str]:
        points = []
        for n in rank_rounds(round_scores)[:SELLING_POINT_COUNT]:
            round_type = RoundType.for_round(n)
            points.append(
                f"Scored {round_scores[n - 1]:.0f}% in {round_type.display_name}, "
                f"{SELLING_POINT_PHRASES[round_type]}"
            )
        return points

    def _round_scores(self, session: InterviewSession) -> dict[str, float]:
        return {
            f"round_{result.round_number}": result.score
            for result in session.round_results
            if result is not None
        }

    def _round_feedback(self, session: InterviewSession) -> dict[str, list[str]]:
        feedback = {}
        for result in session.round_results:
            if result is None:
                continue
            lines = list(result.feedback) or ([result.summary] if result.summary else [])
            feedback[f"round_{result.round_number}"] = lines
        return feedback
