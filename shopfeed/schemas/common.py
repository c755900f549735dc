"""
Common schemas used across the API
"""
from typing import Dict, Optional

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = "ok"
    timestamp: str
    version: str
    snapshot: str = "unknown"


class ReadinessResponse(BaseModel):
    """Readiness probe response"""
    status: str
    timestamp: str
    checks: Dict[str, bool]
    detail: Optional[str] = None
