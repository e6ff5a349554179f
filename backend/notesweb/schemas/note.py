"""
Notes Web — Entities & Response Schemas
========================================

What:  Pydantic models for the two domain entities (Author, Note) and the
       health-check response.
How:   Entities are frozen models. Equality is pydantic's structural
       equality over every field, so two notes are equal only when their
       ids, titles, contents, and nested authors are all equal. Comparing
       against None or any non-model value returns False.
Who:   Created by callers via `Author.create` / `Note.create`, rebuilt by
       NoteStore on every read, handed to the renderer and templates.

Entity lifecycle:
    created in memory → persisted once (NoteStore.add_*) → read back as a
    fresh value. Nothing is ever updated or deleted.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """A fresh 128-bit random identifier rendered as text."""
    return str(uuid.uuid4())


# ══════════════════════════════════════════════════════════════════════════
# Entities
# ══════════════════════════════════════════════════════════════════════════


class Author(BaseModel):
    """
    A note author.

    `name` is not validated; an empty string is a valid name.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque unique identifier (uuid4 text)")
    name: str = Field(description="Display name")

    @classmethod
    def create(cls, name: str) -> "Author":
        return cls(id=new_id(), name=name)


class Note(BaseModel):
    """
    A note, always attached to exactly one author.

    Passing `author=None` fails at construction with a pydantic
    ValidationError, so no note without an author can reach the store.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque unique identifier (uuid4 text)")
    title: str = Field(description="Display title")
    content: str = Field(description="Note body")
    author: Author = Field(description="The note's author")

    @classmethod
    def create(cls, title: str, content: str, author: Author) -> "Note":
        return cls(id=new_id(), title=title, content=content, author=author)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /healthz for probes and monitoring.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
