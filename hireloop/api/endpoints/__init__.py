"""
API endpoint modules for HireLoop
"""

from hireloop.api.endpoints import conversation, gatekeeper, pipeline, profiles, report

__all__ = ["conversation", "gatekeeper", "pipeline", "profiles", "report"]
