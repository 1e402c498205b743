"""
Quillnote Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database and the summarization provider, returns status.

Status levels:
    - healthy:   All dependencies operational
    - degraded:  Summarization unavailable, CRUD still works
    - unhealthy: Database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from quillnote import __version__
from quillnote.config import settings
from quillnote.database import engine
from quillnote.schemas.note import HealthResponse
from quillnote.services.circuit_breaker import CircuitBreaker
from quillnote.services.llm_factory import get_llm_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
@router.get("/api/health", response_model=HealthResponse, include_in_schema=False)
async def health_check() -> HealthResponse:
    """
    Probe database and provider connectivity, return aggregate status.

    Check details:
        Database: SELECT 1
        Provider: circuit breaker state first, then a model listing
    """
    db_status = "connected"
    llm_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    try:
        llm = get_llm_service()
        if not llm.is_configured:
            llm_status = "not_configured"
        elif llm.circuit_breaker.state == CircuitBreaker.OPEN:
            llm_status = "circuit_open"
        elif not await llm.health_check():
            llm_status = "unavailable"
    except Exception as e:
        llm_status = "unavailable"
        logger.warning("Health check: summarization provider unreachable: %s", str(e))

    if llm_status != "available" and overall != "unhealthy":
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        llm=llm_status,
        provider=settings.llm_provider,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
