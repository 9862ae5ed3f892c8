"""
Exception hierarchy for HireLoop.

Oracle failures are split into "unavailable" (transport, HTTP, rate limit)
and "malformed" (the oracle answered but the text could not be parsed).
Which of the two is tolerated is decided per component in
``hireloop.core.policy``.
"""


class HireLoopError(Exception):
    """Base class for all HireLoop errors."""
    pass


class SessionNotFound(HireLoopError):
    """Raised when a session id is unknown."""
    pass


class ProfileNotFound(HireLoopError):
    """Raised when the profile repository has no such candidate."""
    pass


class StateTransitionError(HireLoopError):
    """Raised when an invalid state transition is attempted."""
    pass


class OutOfSequence(HireLoopError):
    """Raised when an operation addresses the wrong round for the session's state."""

    def __init__(self, message: str, expected_round: int | None = None, received_round: int | None = None):
        super().__init__(message)
        self.expected_round = expected_round
        self.received_round = received_round


class QuestionsNotReady(HireLoopError):
    """Raised when answers arrive for a round whose questions were never attached."""
    pass


class OracleUnavailable(HireLoopError):
    """The grading oracle could not be reached or returned an error status."""
    pass


class OracleRateLimited(OracleUnavailable):
    """The grading oracle rejected the call with a rate-limit status."""
    pass


class OracleMalformedResponse(HireLoopError):
    """The grading oracle returned text that is not the expected JSON object."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class EmptyEvidence(HireLoopError):
    """No project or skill evidence exists for the gatekeeper to judge."""
    pass


class InvalidInput(HireLoopError):
    """An answer payload is missing or has the wrong shape for its item."""
    pass
