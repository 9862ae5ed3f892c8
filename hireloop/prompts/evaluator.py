"""
AI Evaluator Prompt Templates

Contains structured prompts for grading round submissions and for the
project authenticity audit.

Grading dimensions by round:
- Aptitude / Resume Deep-Dive: summary only (correctness is graded locally)
- Technical: short answers graded 0 or 1
- Coding: logic, complexity, edge cases, code quality
- Written Communication: clarity, professionalism, relevance
"""

import json

from hireloop.models.evaluation import RoundType
from hireloop.models.question import QuestionItem


class EvaluatorPrompts:
    """
    Prompt templates for oracle grading.

    Key principles:
    - Numeric scores that can be computed locally never come from the oracle
    - Every prompt pins the exact JSON shape expected back
    - Candidate text is quoted verbatim
    """

    SYSTEM_CONTEXT = """You are an expert technical interviewer grading a candidate's submission.

Your role:
- Grade objectively against the stated criteria
- Be fair but strict about technical accuracy
- Keep feedback short and actionable
"""

    CODING_RUBRIC = """
=== GRADING CRITERIA ===
1. Logic Correctness (Does it solve the problem?)
2. Time & Space Complexity (Is it optimal?)
3. Edge Cases (Does it handle nulls, empty inputs, etc.?)
4. Code Quality (Readability, Naming)
"""

    # =========================================================================
    # OBJECTIVE ROUNDS
    # =========================================================================

    def generate_mcq_summary_prompt(
        self,
        round_type: RoundType,
        target_role: str,
        correct: int,
        total: int,
        score: float,
        passed: bool,
    ) -> str:
        """Generate prompt asking for a short summary of an MCQ round."""
        return f"""{self.SYSTEM_CONTEXT}

=== CONTEXT ===
Round: {round_type.display_name}
Role: {target_role}
Total Questions: {total}
Correct: {correct}
Score: {score:.0f}%
Verdict: {"PASSED" if passed else "FAILED"}

=== YOUR TASK ===
Write a short summary (1-2 sentences) of the candidate's level in this round
and what they should focus on.

Return ONLY a JSON object: {{"summary": "string"}}
"""

    def generate_short_answer_prompt(
        self,
        target_role: str,
        items: list[tuple[QuestionItem, str]],
    ) -> str:
        """
        Generate prompt for grading technical short answers.

        Args:
            target_role: Role being interviewed for
            items: (question, answer) pairs; only answered items are sent
        """
        responses = [
            {
                "id": item.id,
                "question": item.prompt,
                "userAnswer": answer,
                "expectedTopics": item.rubric_hint or item.explanation or "N/A",
            }
            for item, answer in items
        ]

        return f"""{self.SYSTEM_CONTEXT}

=== CONTEXT ===
Role: {target_role}

=== SHORT ANSWER RESPONSES ===
{json.dumps(responses, indent=2)}

=== YOUR TASK ===
For each response, assign a score of 1 (Pass/Good) or 0 (Fail/Weak) based on
technical accuracy and relevance.

Return ONLY a JSON object:
{{
    "grades": [
        {{"id": "question id", "score": 0 or 1, "feedback": "Brief comment"}}
    ],
    "summary": "1-2 sentence professional feedback on their technical depth"
}}
"""

    # =========================================================================
    # CODING
    # =========================================================================

    def generate_coding_prompt(self, problem: QuestionItem, code: str) -> str:
        """Generate prompt for grading a coding submission."""
        constraints = "\n".join(f"- {c}" for c in problem.constraints) or "None specified"

        return f"""You are an automated code reviewer.

=== PROBLEM: {problem.title or problem.id} ===
{problem.prompt}

Constraints:
{constraints}

=== CANDIDATE'S CODE ({problem.language or "unspecified language"}) ===
{code}
{self.CODING_RUBRIC}
=== YOUR TASK ===
Return a score (0-100) and exactly 3 specific points of feedback.

Return ONLY a JSON object:
{{
    "score": 0,
    "feedback": ["point 1", "point 2", "point 3"],
    "analysis": "string",
    "complexity": {{"time": "string", "space": "string"}}
}}
"""

    # =========================================================================
    # WRITTEN COMMUNICATION
    # =========================================================================

    def generate_written_prompt(
        self,
        target_role: str,
        items: list[tuple[QuestionItem, str]],
    ) -> str:
        """Generate prompt for holistic grading of written responses."""
        task_summary = "\n\n".join(
            f"Task: {item.title or item.prompt}\nResponse: {answer or '(No response)'}"
            for item, answer in items
        )

        return f"""Evaluate these written assessment responses for a {target_role} role candidate.

=== TASKS AND RESPONSES ===
{task_summary}

=== YOUR TASK ===
Grade on clarity, professionalism, and relevance.

Return ONLY a JSON object: {{"score": 75, "feedback": "concise feedback string"}}
"""

    # =========================================================================
    # GATEKEEPER
    # =========================================================================

    def generate_gatekeeper_prompt(
        self,
        evidence_text: str,
        target_role: str,
        min_match: int,
    ) -> str:
        """Generate prompt for the project authenticity audit."""
        return f"""You are a strict technical gatekeeper auditing a candidate before a
resume deep-dive interview.

=== TARGET ROLE ===
{target_role}

=== CANDIDATE'S PROJECTS AND SKILLS ===
{evidence_text}

=== YOUR TASK ===
Decide whether this evidence demonstrates at least a {min_match}% baseline
match to the technical requirements of the target role. Judge only what the
projects actually show, not what is claimed.

Return ONLY a JSON object:
{{
    "verified": true or false,
    "match_score": 0-100,
    "reason": "One sentence explaining the decision"
}}
"""
