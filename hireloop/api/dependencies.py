"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

import logging

from hireloop.core.conversation import ConversationInterviewer
from hireloop.core.evaluation_engine import EvaluationEngine
from hireloop.core.gatekeeper import Gatekeeper
from hireloop.core.interview_orchestrator import InterviewOrchestrator
from hireloop.core.oracle import GradingOracle
from hireloop.core.profiles import InMemoryProfileRepository
from hireloop.core.question_generator import QuestionGenerator
from hireloop.core.report_generator import ReportComposer

logger = logging.getLogger(__name__)


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_oracle: GradingOracle | None = None
_profiles: InMemoryProfileRepository | None = None
_gatekeeper: Gatekeeper | None = None
_orchestrator: InterviewOrchestrator | None = None
_conversation: ConversationInterviewer | None = None


def get_oracle() -> GradingOracle:
    """Get the grading oracle client singleton."""
    global _oracle

    if _oracle is None:
        _oracle = GradingOracle()

    return _oracle


def get_profiles() -> InMemoryProfileRepository:
    """Get the profile repository singleton."""
    global _profiles

    if _profiles is None:
        _profiles = InMemoryProfileRepository()

    return _profiles


def get_gatekeeper() -> Gatekeeper:
    """Get the gatekeeper singleton."""
    global _gatekeeper

    if _gatekeeper is None:
        _gatekeeper = Gatekeeper(get_oracle())

    return _gatekeeper


def get_orchestrator() -> InterviewOrchestrator:
    """
    Get the pipeline orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator

    if _orchestrator is None:
        oracle = get_oracle()
        _orchestrator = InterviewOrchestrator(
            profiles=get_profiles(),
            evaluation_engine=EvaluationEngine(oracle),
            gatekeeper=get_gatekeeper(),
            question_generator=QuestionGenerator(oracle),
            report_composer=ReportComposer(oracle),
        )

    return _orchestrator


def get_conversation_interviewer() -> ConversationInterviewer:
    """Get the conversational interviewer singleton."""
    global _conversation

    if _conversation is None:
        _conversation = ConversationInterviewer(
            oracle=get_oracle(),
            profiles=get_profiles(),
            gatekeeper=get_gatekeeper(),
        )

    return _conversation


async def cleanup():
    """Cleanup resources on shutdown."""
    global _oracle, _profiles, _gatekeeper, _orchestrator, _conversation

    if _oracle is not None and hasattr(_oracle, "close"):
        await _oracle.close()
        logger.info("Closed grading oracle client")

    _oracle = None
    _profiles = None
    _gatekeeper = None
    _orchestrator = None
    _conversation = None
