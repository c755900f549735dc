"""
Custom exceptions for the application
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shopfeed.core.config import settings
from shopfeed.core.logging import log


class BaseAPIException(HTTPException):
    """Base exception for API errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, str]] = None, **kwargs):
        super().__init__(status_code=self.status_code, detail=detail or self.detail, headers=headers or self.headers)
        # Store any additional context
        self.context = kwargs

    def __str__(self) -> str:
        return self.detail


class ConfigurationError(BaseAPIException):
    """Required setting is missing or invalid"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Configuration error"


class SnapshotNotFoundError(BaseAPIException):
    """Catalog snapshot file does not exist"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Catalog snapshot not found"


class SnapshotInvalidError(BaseAPIException):
    """Catalog snapshot file could not be parsed"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Catalog snapshot is invalid"


class ExternalServiceError(BaseAPIException):
    """External service error"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "External service unavailable"


class SquareAPIError(ExternalServiceError):
    """Square API returned a non-success response"""

    detail = "Square API error"

    def __init__(self, response_status: int, body: str, **kwargs):
        self.response_status = response_status
        self.body = body
        super().__init__(
            detail=f"Square API error ({response_status}): {body}",
            response_status=response_status,
            **kwargs,
        )


# Error response models for OpenAPI documentation
class ErrorDetail(BaseModel):
    """Error detail model"""

    message: str
    type: str
    context: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Standard error response"""

    error: ErrorDetail
    timestamp: str


# Exception handlers
async def handle_api_exception(request: Request, exc: BaseAPIException) -> JSONResponse:
    """Handle API exceptions with structured response"""
    error_response = ErrorResponse(
        error=ErrorDetail(message=exc.detail, type=exc.__class__.__name__, context=getattr(exc, "context", {})),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    return JSONResponse(status_code=exc.status_code, content=error_response.model_dump(), headers=exc.headers)


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    # Log the full exception
    log.opt(exception=exc).error(f"Unexpected error on {request.url.path}")

    # Don't expose internal errors in production
    if settings.debug:
        detail = str(exc)
    else:
        detail = "An unexpected error occurred"

    error_response = ErrorResponse(
        error=ErrorDetail(message=detail, type="InternalServerError", context={}),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_response.model_dump())
