"""
SQLAlchemy 2.0 Database Configuration

Declarative base and the engine/session holder built from application
settings.
"""

from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from subtracker.settings import Settings

# ==========================================
# SQLAlchemy 2.0 Declarative Base
# ==========================================


class Base(DeclarativeBase):
    """Base class for all database models using SQLAlchemy 2.0 declarative mapping."""

    pass


# ==========================================
# Engine and Session Management
# ==========================================


class Database:
    """Owns the async engine and the session factory for one application."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create the engine described by ``settings.database``."""
        db = settings.database
        if db.is_sqlite_memory:
            # SQLite in-memory databases must share a single connection
            engine = create_async_engine(
                db.sqlalchemy_url,
                echo=db.echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif db.is_sqlite:
            engine = create_async_engine(db.sqlalchemy_url, echo=db.echo)
        else:
            engine = create_async_engine(
                db.sqlalchemy_url,
                echo=db.echo,
                pool_size=db.pool_size,
                max_overflow=db.max_overflow,
                pool_timeout=db.pool_timeout,
                pool_recycle=db.pool_recycle,
                pool_pre_ping=db.pool_pre_ping,
            )
        return cls(engine)

    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, rolling back on error."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables in the database."""
        # Register models on Base.metadata
        from subtracker.subscriptions import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        """Drop all tables from the database. Use with caution!"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def check_health(self) -> bool:
        """Check if the database is accessible."""
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# ==========================================
# FastAPI dependency
# ==========================================


async def get_async_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for getting an async database session."""
    database: Database = request.app.state.database
    async for session in database.session():
        yield session


__all__ = [
    "Base",
    "Database",
    "get_async_session",
]
