from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

# Create base class for models
Base = declarative_base()


def to_async_url(database_url: str) -> str:
    """Convert a plain database URL to its async driver variant."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return database_url


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given database URL."""
    return create_async_engine(to_async_url(database_url), echo=echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create async session maker bound to the engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


async def init_db(engine: AsyncEngine):
    """Initialize database."""
    # Register models on the metadata before creating tables
    import models.reminder  # noqa: F401
    import models.user  # noqa: F401

    async with engine.begin() as conn:
        # Create tables
        await conn.run_sync(Base.metadata.create_all)
