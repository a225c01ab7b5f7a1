"""
Health check endpoints
"""

import psutil
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.cache import cache_manager
from app.core.config import settings
from app.core.database import DatabaseHealthCheck, get_db

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "success": True,
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.APP_VERSION,
    }


@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Detailed health check"""
    health_status = {
        "success": True,
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.APP_VERSION,
        "checks": {},
    }

    # Check database
    database = DatabaseHealthCheck.check_connection(db)
    health_status["checks"]["database"] = database
    if database["status"] != "healthy":
        health_status["status"] = "degraded"

    # Check Redis
    if settings.REDIS_ENABLED:
        health_status["checks"]["redis"] = "healthy" if cache_manager.connected else "disconnected"
    else:
        health_status["checks"]["redis"] = "disabled"

    # Check process resources
    memory = psutil.virtual_memory()
    health_status["checks"]["resources"] = {
        "cpu_percent": psutil.cpu_percent(interval=None),
        "memory_percent": memory.percent,
        "memory_available_mb": round(memory.available / (1024 * 1024), 1),
    }

    return health_status
