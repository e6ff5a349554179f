"""
Notes Web — Database Engine & Session Factory
==============================================

What:  Declarative base, async engine construction, and session factory.
How:   `build_engine()` creates an async engine for any SQLAlchemy URL and,
       for SQLite, turns foreign-key enforcement on for every new connection.
       `build_session_factory()` binds an async_sessionmaker to that engine.
Who:   NoteStore owns exactly one engine built here; models inherit `Base`.
When:  The engine is built when the store is opened, not at import time.

SQLite note:
    SQLite ships with foreign keys disabled per connection. Without the
    PRAGMA below, `notes.author_id` could point at an author that does not
    exist, so the pragma is issued on every pooled connection.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata, which `NoteStore.create_schema()` uses
    to create the authors and notes tables.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for a note store.

    Raises whatever SQLAlchemy raises for a malformed URL or a missing
    driver (ArgumentError, NoSuchModuleError); the caller translates it.
    """
    engine = create_async_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: records are read after the transaction ends
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
