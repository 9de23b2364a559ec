"""
Application lifespan: logging setup on startup, engine disposal on shutdown.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from app.core.config import settings
from app.core.database import db_manager
from app.core.logger import configure_logging, get_logger
from fastapi import FastAPI

logger = get_logger(__name__)


def _redacted_database_url() -> str:
    return settings.database_url.rsplit("@", 1)[-1]


async def startup_tasks() -> None:
    configure_logging()

    # Local SQLite databases are created on the fly; everything else goes through alembic
    if settings.database_url.startswith("sqlite") and not settings.is_production:
        await db_manager.create_tables()

    logger.info(
        "Service starting",
        environment=settings.environment,
        storage_provider=settings.storage_provider,
        database=_redacted_database_url(),
    )


async def shutdown_tasks() -> None:
    await db_manager.close()
    logger.info("Service stopped")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await startup_tasks()
    try:
        yield
    finally:
        await shutdown_tasks()


async def check_database_health() -> tuple[bool, str]:
    """Probe the database with a trivial query."""
    if await db_manager.health_check():
        return True, "reachable"
    return False, "unreachable"
