"""
Notes Web — Author & Note SQLAlchemy Models
============================================

What:  ORM models for the `authors` and `notes` tables.
How:   Inherit from the shared DeclarativeBase; NoteStore converts between
       these rows and the immutable Author/Note entities in schemas/note.py.
Who:   Used only by NoteStore. Routes and templates never see these classes.

Table Design:
    authors(author_id TEXT PRIMARY KEY, author_name TEXT)
    notes(note_id TEXT PRIMARY KEY, title TEXT, content TEXT,
          author_id TEXT REFERENCES authors(author_id))

    Identifiers are uuid4 strings generated by the entity constructors, so
    the columns carry no server-side defaults. Rows are never updated or
    deleted by the application.
"""

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from notesweb.database import Base


class AuthorRecord(Base):
    """A persisted author row."""

    __tablename__ = "authors"

    author_id: Mapped[str] = mapped_column(Text, primary_key=True)
    author_name: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<AuthorRecord(author_id='{self.author_id}', author_name='{self.author_name}')>"


class NoteRecord(Base):
    """
    A persisted note row.

    author_id is declared as a foreign key. On SQLite the constraint is only
    enforced because database.build_engine enables the foreign_keys pragma.
    """

    __tablename__ = "notes"

    note_id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    author_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("authors.author_id"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<NoteRecord(note_id='{self.note_id}', author_id='{self.author_id}')>"
