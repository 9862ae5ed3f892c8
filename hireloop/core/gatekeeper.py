"""
Gatekeeper - one-time project authenticity audit.

Judges whether a candidate's claimed projects and skills show a baseline
match to the target role before the resume deep-dive. Empty evidence is a
hard fail. Any oracle failure lets the candidate through, because an
infrastructure fault must never screen someone out.
"""

import logging
from typing import Any

from hireloop.config.settings import get_settings
from hireloop.core.exceptions import EmptyEvidence
from hireloop.core.oracle import parse_oracle_json
from hireloop.core.policy import get_policy
from hireloop.core.scoring import clamp
from hireloop.models.candidate import CandidateProfile
from hireloop.models.evaluation import GatekeeperVerdict
from hireloop.prompts.evaluator import EvaluatorPrompts

logger = logging.getLogger(__name__)


class Gatekeeper:
    """Runs the authenticity audit against the grading oracle."""

    def __init__(
        self,
        oracle: Any,
        prompts: EvaluatorPrompts | None = None,
        min_match: int | None = None,
    ):
        """
        Args:
            oracle: Grading oracle
            prompts: Prompt templates
            min_match: Baseline match percentage (defaults to settings)
        """
        self.oracle = oracle
        self.prompts = prompts or EvaluatorPrompts()
        self.min_match = min_match if min_match is not None else get_settings().gatekeeper_min_match

    async def audit(self, evidence: CandidateProfile | None, target_role: str) -> GatekeeperVerdict:
        """
        Audit a candidate's evidence against the target role.

        Never raises: empty evidence fails closed, oracle failure fails open.

        Args:
            evidence: Profile carrying skills and project evidence
            target_role: Role being interviewed for

        Returns:
            GatekeeperVerdict
        """
        try:
            evidence_text = self._evidence_text(evidence)
        except EmptyEvidence as e:
            policy = get_policy("gatekeeper_empty")
            logger.info(f"Gatekeeper rejected: {e}")
            return GatekeeperVerdict(
                verified=False,
                match_score=int(policy.default_score),
                reason=policy.default_feedback,
            )

        prompt = self.prompts.generate_gatekeeper_prompt(evidence_text, target_role, self.min_match)

        try:
            raw = await self.oracle.complete(prompt)
            verdict = self._parse_verdict(parse_oracle_json(raw))
        except Exception as e:
            # Fail open on any audit fault
            policy = get_policy("gatekeeper")
            logger.warning(f"Gatekeeper audit bypassed: {type(e).__name__}: {e}")
            return GatekeeperVerdict(
                verified=True,
                match_score=int(policy.default_score),
                reason=policy.default_feedback,
                bypassed=True,
            )

        logger.info(
            f"Gatekeeper verdict for '{target_role}': verified={verdict.verified}, "
            f"match={verdict.match_score}"
        )
        return verdict

    def _evidence_text(self, evidence: CandidateProfile | None) -> str:
        if evidence is None:
            raise EmptyEvidence("No profile supplied")
        skills = [s for s in evidence.skills if s and s.strip()]
        if not evidence.evidence() and not skills:
            raise EmptyEvidence("Profile has no projects or skills")
        return evidence.evidence_text()

    def _parse_verdict(self, data: dict[str, Any]) -> GatekeeperVerdict:
        verified = data.get("verified", data.get("isProjectVerified"))
        if not isinstance(verified, bool):
            raise ValueError("Audit verdict has no boolean 'verified' field")

        score = data.get("match_score", data.get("projectMatchScore", 0))
        reason = data.get("reason") or (
            "Evidence matches the role." if verified else "Evidence does not match the role."
        )
        return GatekeeperVerdict(
            verified=verified,
            match_score=int(round(clamp(float(score)))),
            reason=str(reason),
        )
