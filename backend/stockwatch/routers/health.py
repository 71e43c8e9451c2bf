from fastapi import APIRouter

from stockwatch.core.config import settings
from stockwatch.db.mongo import get_db
from stockwatch.tasks.scheduler import get_scheduler_status

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Health check endpoint for monitoring"""
    status = {
        "status": "healthy",
        "configured": settings.configured,
        "database": "unknown",
        "scheduler": get_scheduler_status(),
    }
    try:
        await get_db().command("ping")
        status["database"] = "healthy"
    except Exception:
        status["database"] = "unhealthy"
        status["status"] = "degraded"
    if not settings.configured:
        status["status"] = "degraded"
    return status
