import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from relaystore.core.config import settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# Ensure async URL has the right prefix
if SQLALCHEMY_DATABASE_URL.startswith("postgresql://"):
    logger.warning(
        "DATABASE_URL is missing the +asyncpg driver suffix, adding it for the async engine."
    )
    ASYNC_SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace(
        "postgresql://", "postgresql+asyncpg://", 1
    )
else:
    ASYNC_SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL

engine_options: dict = {"echo": settings.DATABASE_ECHO}
if settings.DATABASE_ISOLATION_LEVEL:
    engine_options["isolation_level"] = settings.DATABASE_ISOLATION_LEVEL

async_engine = create_async_engine(ASYNC_SQLALCHEMY_DATABASE_URL, **engine_options)
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


Base = declarative_base()


@asynccontextmanager
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """Provides one session (one transaction) for the lifetime of a request."""
    session: AsyncSession = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error in async session: {e}", exc_info=True)
        await session.rollback()
        raise
    except Exception as e:
        logger.error(f"Unexpected error in async session: {e}", exc_info=True)
        await session.rollback()
        raise
    finally:
        # Closing also rolls back a transaction left open by cancellation
        await session.close()


async def create_tables() -> None:
    """Creates all tables known to the metadata. Used instead of migrations."""
    # Models must be imported so they are attached to Base.metadata
    import relaystore.models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables checked/created.")
