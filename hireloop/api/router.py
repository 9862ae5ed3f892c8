"""
Main API router for HireLoop

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from hireloop.api.endpoints import conversation, gatekeeper, pipeline, profiles, report

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    profiles.router,
    prefix="/profiles",
    tags=["Profiles"]
)

api_router.include_router(
    pipeline.router,
    prefix="/pipeline",
    tags=["Pipeline"]
)

api_router.include_router(
    conversation.router,
    prefix="/conversation",
    tags=["Conversation"]
)

api_router.include_router(
    gatekeeper.router,
    prefix="/gatekeeper",
    tags=["Gatekeeper"]
)

api_router.include_router(
    report.router,
    prefix="/report",
    tags=["Report"]
)
