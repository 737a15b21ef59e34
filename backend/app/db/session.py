"""
Database engine and sessions for the ledger.

Two ways in:
- ``get_db`` yields one request-scoped session (auth endpoints)
- ``get_session_factory`` hands out the factory itself, so each record store
  call can open, commit and close its own short-lived session
"""

from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from backend.app.core.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Keyword arguments for ``create_async_engine``.

    Pool sizing only applies to server databases; SQLite (used for local
    seeding and tests) rejects ``pool_size``/``max_overflow``.
    """
    options: Dict[str, Any] = {"echo": settings.db_echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# Rows outlive the session that loaded them: snapshots are handed to the
# aggregation and report code after the store call has closed its session.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db():
    """FastAPI dependency: one session for the whole request."""
    async with AsyncSessionLocal() as session:
        yield session


def get_session_factory() -> async_sessionmaker:
    """FastAPI dependency: the factory the record stores open sessions from."""
    return AsyncSessionLocal
