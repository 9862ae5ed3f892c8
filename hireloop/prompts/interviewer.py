"""
AI Interviewer Prompt Templates

Contains structured prompts for:
- Question set generation for each pipeline round
- The conversational interview (opening question and per-answer turns)

Questions adapt to the target role's industry rather than assuming a
software role.
"""

from hireloop.models.candidate import CandidateProfile
from hireloop.models.conversation import ConversationSession
from hireloop.models.evaluation import RoundType


DEEP_PROBE_DIRECTIVE = (
    "CRITICAL DEEP-PROBE REQUIREMENT: The candidate passed the technical screening. "
    "You MUST extract at least 3 specific variables, libraries, or functions explicitly "
    "mentioned in the candidate's project data. Force the candidate to explain exactly "
    "how they implemented or utilized those 3 specific items in their code architecture."
)


class InterviewerPrompts:
    """
    Prompt templates for the AI interviewer.

    Key principles:
    - Role-specific questions, adapted to the candidate's industry
    - One exact JSON shape per prompt
    - Never reveal answers in conversational turns
    """

    SYSTEM_CONTEXT = """You are an experienced interviewer running a structured hiring assessment.

Guidelines:
- Ask practical, role-relevant questions
- Prefer scenario-based questions over trivia
- Keep wording concise and unambiguous
"""

    INDUSTRY_ALIGNMENT = """INDUSTRY ALIGNMENT: All questions MUST be specific to the target role.
- Tech roles: architecture, algorithms, tools, debugging, system design
- Marketing/Business: metrics, campaigns, strategy, customer psychology
- Finance: models, regulations, risk, financial logic
- Mechanical/Civil: design principles, materials, simulations, processes
"""

    MCQ_SHAPE = """{
    "questions": [
        {
            "id": "1",
            "question": "string",
            "options": ["option A", "option B", "option C", "option D"],
            "correctAnswer": 0,
            "explanation": "string",
            "topic": "string"
        }
    ]
}"""

    # =========================================================================
    # ROUND QUESTION SETS
    # =========================================================================

    def generate_round_questions_prompt(
        self,
        round_type: RoundType,
        candidate: CandidateProfile,
        directives: list[str] | None = None,
    ) -> str:
        """
        Generate the question-set prompt for a pipeline round.

        Args:
            round_type: Round to generate for
            candidate: Candidate snapshot
            directives: Extra session instructions (e.g. the deep-probe directive)
        """
        builders = {
            RoundType.APTITUDE: self._aptitude_prompt,
            RoundType.TECHNICAL: self._technical_prompt,
            RoundType.RESUME_DEEP_DIVE: self._resume_prompt,
            RoundType.CODING: self._coding_prompt,
            RoundType.WRITTEN_COMMUNICATION: self._written_prompt,
        }
        prompt = builders[round_type](candidate)

        if directives:
            prompt += "\n=== ADDITIONAL REQUIREMENTS ===\n" + "\n".join(directives) + "\n"

        return prompt

    def _aptitude_prompt(self, candidate: CandidateProfile) -> str:
        return f"""You are an expert recruitment examiner. Generate exactly 10 Aptitude MCQ
questions for a candidate applying for: {candidate.target_role}

Cover a professional aptitude test:
- Logical Reasoning
- Numerical/Quantitative Ability
- Verbal Ability (English Proficiency)
- Data Interpretation relative to the {candidate.target_role} domain

Return ONLY a valid JSON object with a single key "questions" containing 10 objects:
{self.MCQ_SHAPE}
"""

    def _technical_prompt(self, candidate: CandidateProfile) -> str:
        return f"""{self.SYSTEM_CONTEXT}
Generate exactly 10 technical questions for a candidate applying for: {candidate.target_role}

{self.INDUSTRY_ALIGNMENT}
STRUCTURE:
- Questions 1-8: Multiple Choice Questions, strictly technical/fact-based ("type": "mcq")
- Questions 9-10: Short Answer Questions asking for a brief explanation or approach
  ("type": "short_answer", no options, "explanation" lists the key points expected)

Return ONLY a valid JSON object with a single key "questions":
{{
    "questions": [
        {{"id": "1", "type": "mcq", "question": "string", "options": ["A", "B", "C", "D"],
          "correctAnswer": 0, "explanation": "string", "topic": "string"}},
        {{"id": "9", "type": "short_answer", "question": "string", "topic": "string",
          "explanation": "Key points expected in the answer"}}
    ]
}}
"""

    def _resume_prompt(self, candidate: CandidateProfile) -> str:
        resume = candidate.resume_summary or "No resume summary provided."
        return f"""You are a Senior Interviewer. Generate exactly 10 Deep-Dive MCQ questions based
on the candidate's actual projects, experience, and skills.

Target Role: {candidate.target_role}

Resume Summary:
{resume}

Projects and Skills (JSON):
{candidate.evidence_text()}

Instructions:
1. Pick specific projects or achievements from the data above.
2. Ask how they executed those projects or handled responsibilities.
3. Probe actual contribution, not generic theory.

Return ONLY a valid JSON object with a single key "questions":
{self.MCQ_SHAPE}
"""

    def _coding_prompt(self, candidate: CandidateProfile) -> str:
        return f"""You are an expert {candidate.target_role} Interviewer. Generate exactly ONE
professional problem or challenge for a candidate applying for this role.

- Tech/Engineering roles: a coding problem with a boilerplate function
- Other roles: a structured case study asking for a strategic response

Return ONLY a valid JSON object:
{{
    "title": "string",
    "problemStatement": "string",
    "constraints": ["string"],
    "boilerplate": "string",
    "language": "string (e.g. Python, JavaScript, Strategic Analysis)"
}}
"""

    def _written_prompt(self, candidate: CandidateProfile) -> str:
        role = candidate.target_role
        return f"""You are a Soft Skills and Communication Expert. Generate exactly 5 Written
Assessment tasks for a candidate applying for: {role}

The tasks must include:
1. Writing a professional email (to a client, manager, or stakeholder).
2. Handling a workplace conflict or situational challenge.
3. Explaining a complex industry concept to a non-expert stakeholder.
4. A project summary or status update relevant to the {role} role.
5. A professional self-introduction tailored to the {role} role.

Return ONLY a valid JSON object with a single key "questions":
{{
    "questions": [
        {{"id": "1", "title": "string", "scenario": "string", "instruction": "string"}}
    ]
}}
"""

    # =========================================================================
    # CONVERSATIONAL INTERVIEW
    # =========================================================================

    def generate_opening_question_prompt(self, candidate: CandidateProfile) -> str:
        """Generate prompt for the first conversational question."""
        return f"""You are an expert recruiter and interviewer for the role: {candidate.target_role}.

Generate the FIRST interview question, tailored to the role.
- Tech roles: a deep-dive question about the candidate's projects or core engineering concepts
- Other roles: a high-level professional question for that industry

Candidate's projects and skills:
{candidate.evidence_text()}

Return ONLY a JSON object:
{{
    "question": "The question text",
    "context": "Brief reason for asking this"
}}
"""

    def generate_turn_prompt(
        self,
        session: ConversationSession,
        answer: str,
        difficulty_instructions: str,
        question_count: int,
        running_average: float,
        min_questions: int,
        deep_probe_directive: str | None = None,
    ) -> str:
        """Generate prompt for evaluating an answer and asking the next question."""
        history = session.get_conversation_history_str() or "(no previous turns)"
        deep_probe = deep_probe_directive or ""

        return f"""You are an expert senior interviewer conducting a professional mock interview
for: "{session.target_role}".

=== CONTEXT ===
Role: {session.target_role}
Candidate's Projects/Background:
{session.candidate.evidence_text()}
Questions answered so far: {question_count}
Candidate's running average score: {running_average:.1f}/10

{difficulty_instructions}
{deep_probe}

{self.INDUSTRY_ALIGNMENT}
=== CONVERSATION HISTORY ===
{history}
Interviewer: {session.current_question}
Candidate's Latest Answer: "{answer}"

=== TASKS ===
1. Evaluate the answer honestly (1-2 sentences). Praise what is correct, identify gaps.
2. Score the answer 0-10.
3. Assess CONFIDENCE from the candidate's language (hedging, certainty, specificity). Score 0-10.
4. Generate the next question following the instructions above.
5. Only if {min_questions} or more questions have been answered and coverage is good, set isFinished: true.

Return ONLY a valid JSON object:
{{
    "feedback": "1-2 sentence evaluation",
    "nextQuestion": "The next interview question",
    "isFinished": false,
    "score": 0,
    "confidence": 0
}}
"""
