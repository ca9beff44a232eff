"""
Health check endpoints.

- /health: Quick overview of system health
- /health/ready: Container readiness check
- /health/live: Container liveness check
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backend.config import settings
from backend.core.database import get_db
from backend.models.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


def _database_ok(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return False


@router.get("", response_model=HealthResponse)
async def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Check health of all services.

    Returns:
        HealthResponse with database status
    """
    db_healthy = _database_ok(db)

    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=settings.APP_VERSION,
        database=db_healthy,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/ready")
async def readiness_check(db: Session = Depends(get_db)) -> dict:
    """
    Readiness check.
    Returns 200 if service is ready to accept traffic.
    """
    if _database_ok(db):
        return {"status": "ready"}
    # Don't expose internal error details
    return {"status": "not ready", "error": "Database connection failed"}


@router.get("/live")
async def liveness_check() -> dict:
    """
    Liveness check.
    Returns 200 if service is alive.
    """
    return {"status": "alive"}
