"""
Database connection with SQLAlchemy async ORM
"""

from typing import Optional, AsyncGenerator
from functools import lru_cache
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.pool import StaticPool

from relief_auth.infra.config.settings import get_settings
from relief_auth.infra.models import Base
from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


class DatabaseManager:
    """SQLAlchemy async database manager"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or settings.DATABASE_URL
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    def _engine_options(self) -> dict:
        if make_url(self.database_url).get_backend_name() == "sqlite":
            # one shared connection so in-memory databases survive between sessions
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False}
            }
        return {
            "pool_pre_ping": True,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_recycle": 3600
        }

    async def connect(self) -> AsyncEngine:
        """Initialize database engine and session factory"""
        if self._engine is not None:
            return self._engine

        url = make_url(self.database_url)
        try:
            self._engine = create_async_engine(
                self.database_url,
                echo=settings.DB_LOGGING_ENABLED,
                **self._engine_options()
            )

            self._session_factory = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False
            )

            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

            logger.info(
                "Connected to database",
                extra={
                    "backend": url.get_backend_name(),
                    "host": url.host,
                    "database": url.database
                }
            )

            return self._engine

        except Exception as e:
            logger.error(
                "Failed to connect to database",
                extra={
                    "backend": url.get_backend_name(),
                    "host": url.host,
                    "database": url.database,
                    "error": str(e)
                }
            )
            self._engine = None
            self._session_factory = None
            raise

    async def create_tables(self) -> None:
        """Create missing tables"""
        engine = await self.connect()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        try:
            engine = await self.connect()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def close(self):
        """Close database engine"""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine closed")
            self._engine = None
            self._session_factory = None

    def get_session_factory(self) -> Optional[async_sessionmaker]:
        return self._session_factory


@lru_cache()
def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance (cached)"""
    return DatabaseManager()


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database session
    Use with FastAPI Depends()
    """
    db_manager = get_database_manager()

    if db_manager.get_session_factory() is None:
        await db_manager.connect()

    session_factory = db_manager.get_session_factory()
    if session_factory is None:
        raise RuntimeError("Database session factory not initialized")

    async with session_factory() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise
