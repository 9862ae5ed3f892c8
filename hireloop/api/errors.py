"""
Mapping from domain errors to HTTP errors.
"""

from fastapi import HTTPException

from hireloop.core.exceptions import (
    EmptyEvidence,
    HireLoopError,
    InvalidInput,
    OracleMalformedResponse,
    OracleUnavailable,
    OutOfSequence,
    ProfileNotFound,
    QuestionsNotReady,
    SessionNotFound,
)


def to_http_exception(error: HireLoopError) -> HTTPException:
    """Translate a HireLoop error into the matching HTTPException."""
    if isinstance(error, (SessionNotFound, ProfileNotFound)):
        return HTTPException(status_code=404, detail=str(error))

    if isinstance(error, OutOfSequence):
        return HTTPException(
            status_code=409,
            detail={
                "message": str(error),
                "expected_round": error.expected_round,
                "received_round": error.received_round,
            },
        )

    if isinstance(error, QuestionsNotReady):
        return HTTPException(status_code=409, detail=str(error))

    if isinstance(error, (OracleUnavailable, OracleMalformedResponse)):
        return HTTPException(status_code=502, detail=f"Grading service error: {error}")

    if isinstance(error, (InvalidInput, EmptyEvidence)):
        return HTTPException(status_code=400, detail=str(error))

    return HTTPException(status_code=500, detail=str(error))
