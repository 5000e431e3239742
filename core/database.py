import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker

from .config import settings

logger = logging.getLogger(__name__)

logger.debug("Using DATABASE_URL=%s", settings.DATABASE_URL)


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite leaves foreign keys unchecked unless every connection asks for them."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,      # check the connection before handing it out
)
if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async session generator.
    Used as Depends(get_db) in routers.
    """
    async with AsyncSessionLocal() as session:
        yield session
