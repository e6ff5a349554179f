"""
Notes Web — Note Store (Storage Gateway)
=========================================

What:  The only component that reads from or writes to the backing store.
How:   Owns one async engine for its whole lifetime. Writes run inside
       `session.begin()`, which commits when the block exits normally and
       rolls back on every error path. Reads are equi-joins of notes and
       authors on author_id, rebuilt into immutable Note/Author entities.
Who:   Created once by the app factory, opened/closed by the lifespan
       handler, shared by every request through app.state.
When:  open() at process start, close() at shutdown.

Error Translation:
    sqlalchemy IntegrityError           → ConstraintError
    any other SQLAlchemyError / OSError → StorageError
    open/close failures, closed store   → StoreConnectionError

    The store does not log and does not retry. Every failure is raised to
    the caller, chained to the original driver exception.

Concurrency:
    The engine (and the driver's pool behind it) is shared by all
    concurrent requests. No extra locking is added here; SQLite's own
    single-writer locking decides what happens to concurrent writers.
"""

from typing import List, Optional

from sqlalchemy import Select, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from notesweb.database import Base, build_engine, build_session_factory
from notesweb.exceptions import (
    ConstraintError,
    NotFoundError,
    StorageError,
    StoreConnectionError,
)
from notesweb.models.note import AuthorRecord, NoteRecord
from notesweb.schemas.note import Author, Note


def _joined_notes() -> Select:
    return select(
        NoteRecord.note_id,
        NoteRecord.title,
        NoteRecord.content,
        AuthorRecord.author_id,
        AuthorRecord.author_name,
    ).join(AuthorRecord, AuthorRecord.author_id == NoteRecord.author_id)


def _row_to_note(row) -> Note:
    return Note(
        id=row.note_id,
        title=row.title,
        content=row.content,
        author=Author(id=row.author_id, name=row.author_name),
    )


class NoteStore:
    """
    Storage gateway for authors and notes.

    Usage:
        store = NoteStore("sqlite+aiosqlite:///./notes.db")
        await store.open()
        await store.create_schema()
        await store.add_author(author)
        await store.add_note(note)
        note = await store.get_note(note.id)
        await store.close()
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def open(self) -> None:
        """
        Build the engine and prove the store is reachable with SELECT 1.

        Raises:
            StoreConnectionError: already open, bad URL, missing driver, or
                the database file cannot be opened.
        """
        if self._engine is not None:
            raise StoreConnectionError(
                message="The note store is already open",
                context={"database_url": self.database_url},
            )

        try:
            engine = build_engine(self.database_url, echo=self._echo)
        except (SQLAlchemyError, ImportError) as e:
            raise StoreConnectionError(
                message="Could not configure the note store",
                context={"database_url": self.database_url, "error_type": type(e).__name__},
            ) from e

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise StoreConnectionError(
                message="Could not open the note store",
                context={"database_url": self.database_url, "error_type": type(e).__name__},
            ) from e

        self._engine = engine
        self._session_factory = build_session_factory(engine)

    async def close(self) -> None:
        """
        Release the engine and every pooled connection.

        Raises:
            StoreConnectionError: the store is not open (e.g. closed twice),
                or disposing the engine failed.
        """
        engine = self._require_engine()
        self._engine = None
        self._session_factory = None
        try:
            await engine.dispose()
        except (SQLAlchemyError, OSError) as e:
            raise StoreConnectionError(
                message="Could not close the note store",
                context={"error_type": type(e).__name__},
            ) from e

    async def create_schema(self) -> None:
        """Create the authors and notes tables if they do not exist."""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                message="Could not create the note store schema",
                context={"error_type": type(e).__name__},
            ) from e

    async def ping(self) -> bool:
        """Lightweight connectivity check used by the health endpoint."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            return False
        return True

    # ── Writes ────────────────────────────────────────────────────────────

    async def add_author(self, author: Author) -> None:
        """
        Insert one author row in its own transaction.

        Raises:
            ConstraintError: an author with this id already exists.
            StorageError: any other database fault.
        """
        await self._insert(
            AuthorRecord(author_id=author.id, author_name=author.name),
            resource="author",
            resource_id=author.id,
        )

    async def add_note(self, note: Note) -> None:
        """
        Insert one note row in its own transaction, keyed to note.author.id.

        Raises:
            ConstraintError: duplicate note id, or the author row is missing.
            StorageError: any other database fault.
        """
        await self._insert(
            NoteRecord(
                note_id=note.id,
                title=note.title,
                content=note.content,
                author_id=note.author.id,
            ),
            resource="note",
            resource_id=note.id,
        )

    async def _insert(self, record: Base, resource: str, resource_id: str) -> None:
        factory = self._require_session_factory()
        try:
            async with factory() as session:
                # begin() commits on normal exit and rolls back on any exception
                async with session.begin():
                    session.add(record)
        except IntegrityError as e:
            raise ConstraintError(
                message=f"{resource} with ID '{resource_id}' conflicts with existing data",
                context={"resource": resource, "resource_id": resource_id},
            ) from e
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                message=f"Could not store the {resource}",
                context={
                    "resource": resource,
                    "resource_id": resource_id,
                    "error_type": type(e).__name__,
                },
            ) from e

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_note(self, note_id: str) -> Note:
        """
        Fetch one note and its author.

        Raises:
            NotFoundError: no note has this id.
            StorageError: the query failed.
        """
        factory = self._require_session_factory()
        try:
            async with factory() as session:
                result = await session.execute(
                    _joined_notes().where(NoteRecord.note_id == note_id)
                )
                row = result.one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                message="Could not retrieve the note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            ) from e

        if row is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return _row_to_note(row)

    async def get_notes(self) -> List[Note]:
        """
        Fetch every note with its author, in the store's natural order.

        The read only succeeds once the whole result has been consumed; a
        fault at any point while iterating raises StorageError. An empty
        store returns an empty list.
        """
        factory = self._require_session_factory()
        try:
            async with factory() as session:
                result = await session.execute(_joined_notes())
                return [_row_to_note(row) for row in result]
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                message="Could not retrieve notes",
                context={"error_type": type(e).__name__},
            ) from e

    # ── Helpers ───────────────────────────────────────────────────────────

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreConnectionError(
                message="The note store is not open",
                context={"database_url": self.database_url},
            )
        return self._engine

    def _require_session_factory(self) -> async_sessionmaker[AsyncSession]:
        self._require_engine()
        return self._session_factory
