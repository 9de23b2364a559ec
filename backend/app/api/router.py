"""
Top-level ``/api`` router.
"""
from app.core.events import check_database_health
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from .v1.router import v1_router

api_router = APIRouter(prefix="/api")
api_router.include_router(v1_router)


@api_router.get("/health", tags=["Health"])
async def readiness():
    """Readiness probe: 503 while the document store is unreachable."""
    database_ok, database_message = await check_database_health()
    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if database_ok else "degraded",
            "database": database_message,
        },
    )
