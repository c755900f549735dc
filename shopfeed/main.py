"""
Shop Feed API - serves the product feed built from the Square catalog snapshot
"""
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from shopfeed.api.v1 import api_router
from shopfeed.api.v1.feeds import router as feeds_router
from shopfeed.core.config import settings
from shopfeed.core.exceptions import BaseAPIException, handle_api_exception, handle_unexpected_exception
from shopfeed.core.logging import log, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events
    """
    # Setup logging
    setup_logging()

    log.info(f"Starting {settings.app_name} {settings.version} ({settings.environment})")
    log.info(f"Serving feed from snapshot {settings.snapshot_path}")

    yield

    log.info(f"Shutting down {settings.app_name}")


def create_application() -> FastAPI:
    """
    Create FastAPI application with all configurations
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json" if settings.debug else None,
        docs_url=f"{settings.api_v1_prefix}/docs" if settings.debug else None,
        redoc_url=None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "feeds", "description": "Product feeds"},
        ],
    )

    # Add custom exception handlers
    app.add_exception_handler(BaseAPIException, handle_api_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)

    # CORS
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.cors_origins],
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    # GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Add API routes
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    # Well-known path polled by Google Merchant Center
    app.include_router(feeds_router, prefix="/feeds", tags=["feeds"], include_in_schema=False)

    # Root endpoint
    @app.get("/", tags=["root"])
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information"""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "environment": settings.environment,
            "feed": "/feeds/google-products.tsv",
        }

    return app


# Create the application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shopfeed.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
        access_log=False,
        server_header=False,
    )
