"""
AI prompt templates for HireLoop

Contains structured prompts for:
- Round question generation
- Conversational interview turns
- Round grading and the gatekeeper audit
- Report narrative and transcript analysis
"""

from hireloop.prompts.interviewer import DEEP_PROBE_DIRECTIVE, InterviewerPrompts
from hireloop.prompts.evaluator import EvaluatorPrompts
from hireloop.prompts.report import ReportPrompts

__all__ = [
    "DEEP_PROBE_DIRECTIVE",
    "InterviewerPrompts",
    "EvaluatorPrompts",
    "ReportPrompts",
]
