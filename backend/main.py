"""
Workspace Membership Service entry point.

``uvicorn main:app`` or ``python main.py``.
"""
from app.api.router import api_router
from app.core.config import settings
from app.core.events import lifespan
from app.core.exceptions import setup_exception_handlers
from app.core.logger import get_logger
from app.core.metrics import PrometheusMiddleware, get_metrics, get_metrics_content_type
from app.core.middleware import setup_middleware
from fastapi import FastAPI, Response

logger = get_logger(__name__)


def create_application() -> FastAPI:
    """Build the FastAPI application with its middleware, handlers and routes."""
    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
    )

    setup_middleware(app)
    setup_exception_handlers(app)
    # Outermost, so it also times the middleware above
    app.add_middleware(PrometheusMiddleware)

    app.include_router(api_router)

    @app.get("/", include_in_schema=False)
    async def service_info():
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "api": "/api/v1",
        }

    @app.get("/health", tags=["Health"])
    async def liveness():
        """Liveness probe."""
        return {"status": "healthy"}

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return Response(content=get_metrics(), media_type=get_metrics_content_type())

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_config=None,
    )
