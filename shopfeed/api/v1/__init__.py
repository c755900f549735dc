"""
API v1 routers
"""

from fastapi import APIRouter

from .feeds import router as feeds_router
from .health import router as health_router

api_router = APIRouter()

# Include routers
api_router.include_router(health_router, tags=["health"])
api_router.include_router(feeds_router, prefix="/feeds", tags=["feeds"])
