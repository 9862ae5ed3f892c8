"""
HireLoop - Multi-Round Candidate Screening Engine

Serves the pipeline, conversational interview, gatekeeper and report APIs.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hireloop.config.settings import get_settings
from hireloop.api.router import api_router
from hireloop.api.dependencies import cleanup

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup checks and shutdown cleanup."""
    # Startup
    logger.info("Starting HireLoop...")
    settings = get_settings()
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")
    if not settings.oracle_api_key:
        logger.warning("ORACLE_API_KEY is not set; oracle calls will fail and fall back where allowed")

    yield

    # Shutdown
    logger.info("Shutting down HireLoop...")
    await cleanup()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Multi-round candidate screening with a project authenticity gate",
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
