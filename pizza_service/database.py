"""
Database Connection Module
Handles the SQLAlchemy async engine, sessions and schema bootstrap.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from pizza_service.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(url: str) -> dict:
    """Pool sizing applies to server databases only."""
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_options(settings.database_url),
)

# Session factory - creates new database sessions
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False  # Objects remain accessible after commit
)


# Base class for all our models
class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    """
    Dependency injection for FastAPI routes.
    Yields a database session and ensures cleanup.
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """
    Create all tables and seed the default admin into an empty database.
    Called once at application startup.
    """
    # Models must be registered on Base.metadata before create_all
    from pizza_service import models
    from pizza_service.repositories import users

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")

    async with async_session_maker() as session:
        user_count = (await session.execute(select(func.count(models.User.id)))).scalar() or 0
        if user_count == 0:
            await users.add_user(
                session,
                name=settings.default_admin_name,
                email=settings.default_admin_email,
                password=settings.default_admin_password,
                roles=[{"role": models.Role.ADMIN.value}],
            )
            logger.info(f"Seeded default admin {settings.default_admin_email}")
