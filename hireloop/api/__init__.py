"""
API layer for HireLoop

Contains FastAPI routers for:
- Candidate profiles
- The five-round pipeline
- Conversational interviews
- Standalone gatekeeper audits
- Reports
"""

from hireloop.api.router import api_router

__all__ = ["api_router"]
