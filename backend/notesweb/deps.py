"""Dependency injection for FastAPI routes.

The store and the renderer are built once by create_app() and parked on
app.state; handlers receive them through these getters, and tests can swap
them with app.dependency_overrides.
"""

from fastapi import Request

from notesweb.services.note_store import NoteStore
from notesweb.services.renderer import NoteRenderer


def get_store(request: Request) -> NoteStore:
    """Get the application's NoteStore."""
    return request.app.state.store


def get_renderer(request: Request) -> NoteRenderer:
    """Get the application's NoteRenderer."""
    return request.app.state.renderer
