"""
Core business logic modules for HireLoop

Contains:
- Interview Orchestrator: State machine for the five-round pipeline
- Evaluation Engine: One evaluator per round type
- Gatekeeper: One-time project authenticity audit
- Adaptive Difficulty Controller: Conversational tier and probe selection
- Conversation Interviewer: Chat-style interview flow
- Report Composer: Final report compilation
"""

from hireloop.core.interview_orchestrator import InterviewOrchestrator
from hireloop.core.evaluation_engine import EvaluationEngine
from hireloop.core.gatekeeper import Gatekeeper
from hireloop.core.difficulty import AdaptiveDifficultyController
from hireloop.core.conversation import ConversationInterviewer
from hireloop.core.question_generator import QuestionGenerator
from hireloop.core.report_generator import ReportComposer
from hireloop.core.oracle import GradingOracle

__all__ = [
    "InterviewOrchestrator",
    "EvaluationEngine",
    "Gatekeeper",
    "AdaptiveDifficultyController",
    "ConversationInterviewer",
    "QuestionGenerator",
    "ReportComposer",
    "GradingOracle",
]
