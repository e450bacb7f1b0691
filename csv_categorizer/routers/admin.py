from fastapi import APIRouter
from typing import Dict, Any
import time
from csv_categorizer.clients.gemini import gemini_client
from csv_categorizer.core.config import config
from csv_categorizer.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Basic application health check"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "service": "categorizer-api",
        "version": config.version
    }


@router.get("/readyz")
async def readiness_check() -> Dict[str, Any]:
    """Readiness check; the classification service needs credentials to be usable"""
    dependencies = {
        "api": True,
        "classification_service": bool(gemini_client.api_key),
    }
    status = "ready" if all(dependencies.values()) else "degraded"

    if status != "ready":
        logger.warning("Classification service credentials are not configured")

    return {
        "status": status,
        "timestamp": time.time(),
        "model": gemini_client.model,
        "dependencies": dependencies
    }
