"""
Health check endpoints
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from shopfeed.api.deps import FeedServiceDep
from shopfeed.core.config import settings
from shopfeed.core.exceptions import BaseAPIException
from shopfeed.core.logging import log
from shopfeed.schemas.common import HealthCheckResponse, ReadinessResponse


router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(feed_service: FeedServiceDep) -> HealthCheckResponse:
    """Basic health check"""
    return HealthCheckResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.version,
        snapshot="present" if feed_service.snapshot_path.exists() else "missing",
    )


@router.get("/health/live", response_model=Dict[str, Any])
async def liveness_probe() -> Dict[str, Any]:
    """Kubernetes liveness probe"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_probe(feed_service: FeedServiceDep) -> ReadinessResponse:
    """
    Readiness probe - the snapshot must load before the feed can be served
    """
    checks = {"snapshot": False}
    detail = None

    try:
        feed_service.get_snapshot()
        checks["snapshot"] = True
    except BaseAPIException as e:
        log.error(f"Snapshot health check failed: {e}")
        detail = e.detail

    return ReadinessResponse(
        status="ok" if all(checks.values()) else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=checks,
        detail=detail,
    )
