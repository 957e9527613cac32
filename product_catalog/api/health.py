import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from product_catalog.database import Database, get_database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    summary="Health check",
    description="Liveness probe. Does not touch the database."
)
async def health_check():
    """Simple health check."""
    return {"status": "OK", "timeStamp": datetime.now(timezone.utc).isoformat()}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check that MongoDB answers a ping."
)
async def readiness_check(database: Database = Depends(get_database)):
    """
    Readiness check for the database.

    Returns 503 while MongoDB is unreachable.
    """
    checks = {"database": False}

    try:
        checks["database"] = await database.ping()
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        checks["database_error"] = str(e)

    if not checks["database"]:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )

    return {"status": "ready", "checks": checks}
