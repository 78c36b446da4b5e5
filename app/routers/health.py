"""
Health Check Router
Simple health check endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status and the analytics timezone in use.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timezone": settings.TIMEZONE,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
