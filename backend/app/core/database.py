"""
Async SQLAlchemy engine and per-request sessions.

One ``AsyncSession`` is one unit of work: ``get_db_session`` commits it when
the endpoint returns and rolls it back when the endpoint raises, so a
workspace and its admin membership are persisted together or not at all.
"""

from typing import Any, AsyncGenerator, Dict, Optional

from app.core.config import get_settings
from app.core.models import Base
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

logger = get_logger(__name__)
settings = get_settings()

# Pool sizing for server databases; SQLite's pools reject these options
SERVER_POOL_OPTIONS = {
    "pool_size": 10,
    "max_overflow": 20,
    "pool_timeout": 30,
    "pool_recycle": 3600,
}


def _engine_options(database_url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(SERVER_POOL_OPTIONS)
    return options


class DatabaseManager:
    """Lazily built engine and session factory for one database URL."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self._database_url = database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def database_url(self) -> str:
        return self._database_url or settings.database_url

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.database_url, **_engine_options(self.database_url))
            logger.info("Database engine created", database=self.database_url.rsplit("@", 1)[-1])
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            # Objects stay readable after commit for response serialization
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    async def create_tables(self) -> None:
        """Create the workspaces and members tables if missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("Database tables dropped")

    async def close(self) -> None:
        """Dispose the engine; the next access builds a new one."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None

    async def health_check(self) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False
        return True


db_manager = DatabaseManager()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding the request's unit of work.

    Yields:
        AsyncSession: Committed on success, rolled back on error
    """
    async with db_manager.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.debug("Unit of work rolled back", error=str(e))
            raise
