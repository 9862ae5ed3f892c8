"""
AI Report Generation Prompts

Contains prompts for the narrative parts of reports. Scores, verdicts and
skill matrices are always computed locally and only shown to the oracle as
context.
"""

from hireloop.models.conversation import ConversationSession
from hireloop.models.report import FinalAggregate
from hireloop.models.evaluation import RoundType


class ReportPrompts:
    """
    Prompt templates for report narrative and transcript analysis.
    """

    SYSTEM_CONTEXT = """You are an expert career coach and hiring manager writing feedback on a
multi-round hiring assessment.

Your role:
- Provide constructive, actionable feedback
- Be encouraging but honest
- Give specific, practical suggestions
"""

    def generate_narrative_prompt(
        self,
        candidate_name: str,
        target_role: str,
        aggregate: FinalAggregate,
    ) -> str:
        """Generate prompt for the final report narrative."""
        score_lines = "\n".join(
            f"- Round {i} ({RoundType.for_round(i).display_name}): {score:.0f}%"
            for i, score in enumerate(aggregate.round_scores, 1)
        )
        ranked = sorted(
            range(1, len(aggregate.round_scores) + 1),
            key=lambda i: aggregate.round_scores[i - 1],
            reverse=True,
        )
        strongest = ", ".join(RoundType.for_round(i).display_name for i in ranked[:3])

        return f"""{self.SYSTEM_CONTEXT}

=== CANDIDATE ===
Name: {candidate_name}
Target Role: {target_role}

=== ROUND SCORES ===
{score_lines}
- Overall Score: {aggregate.headline_score}%
- Verdict: {aggregate.verdict.value}

=== YOUR TASK ===
Write the narrative for this candidate's final report. Do not change the
scores or the verdict. Their strongest rounds, best first: {strongest}.

Return ONLY a valid JSON object:
{{
    "summary": "2-sentence executive summary of the candidate",
    "recommendation": "Specific career advice for this candidate"
}}
"""

    def generate_conversation_analysis_prompt(self, session: ConversationSession) -> str:
        """Generate prompt for analyzing a conversational interview transcript."""
        transcript = session.get_conversation_history_str()

        return f"""You are an expert career coach analyzing a mock interview transcript for the
role: "{session.target_role}".

=== TRANSCRIPT ===
{transcript}

=== SCORING RULES ===
- technicalScore: accuracy and depth of technical answers for the role, out of 100
- communicationScore: clarity, coherence, and structure of responses, out of 100
- confidenceScore: language certainty, specificity, and authority, out of 100
- resources: REAL, useful URLs specific to the gaps found

Return ONLY a valid JSON object with this exact structure:
{{
    "technicalScore": 0,
    "communicationScore": 0,
    "confidenceScore": 0,
    "strengths": ["strength 1", "strength 2", "strength 3"],
    "improvements": ["area 1", "area 2", "area 3"],
    "resources": [
        {{"title": "Specific study topic based on gaps", "url": "https://..."}}
    ],
    "summary": "1-2 sentence overall verdict"
}}
"""
