"""
Database engine and session management with SQLAlchemy async
"""

from sqlalchemy import text
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from typing import Union
from core.exceptions import DatabaseConnectionError
import logging

logger = logging.getLogger(__name__)


def create_engine(database_url: Union[str, URL], echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the migration.

    The pool holds a single connection so the whole run (profile lookup and
    every page transaction) reuses one connection and its prepared statements.
    """
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=1,
        max_overflow=0,
        future=True
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Create session factory bound to the engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


async def check_connection(engine: AsyncEngine) -> None:
    """
    Verify the database is reachable.

    Raises:
        DatabaseConnectionError: If the connection or a trivial query fails
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        raise DatabaseConnectionError(
            "Cannot connect to destination database",
            context={"url": engine.url.render_as_string(hide_password=True)},
            original_exception=e
        )
    logger.info("Database connection verified")


def dialect_insert(db_session: AsyncSession):
    """
    Return the dialect-specific insert() supporting ON CONFLICT.

    PostgreSQL is the only runtime target. The SQLite branch exists for the
    aiosqlite test database and is not supported for real migrations.
    """
    bind = db_session.bind
    if bind is not None and bind.dialect.name == "sqlite":
        return sqlite_insert
    return postgresql_insert
