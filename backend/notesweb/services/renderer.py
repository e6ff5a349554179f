"""
Notes Web — Note Renderer
==========================

What:  Turns one Note or a list of Notes into an HTML response.
How:   Wraps Starlette's Jinja2Templates (autoescaping on). Every page
       extends `_base.html`; `note.html` gets a single `note`, `notes.html`
       gets the `notes` list.
Who:   Built once in create_app(), stored on app.state, and injected into
       route handlers through the `get_renderer` dependency.
"""

from pathlib import Path
from typing import Sequence, Union

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import HTMLResponse

from notesweb.schemas.note import Note


class NoteRenderer:
    """Server-side HTML views for notes."""

    NOTE_TEMPLATE = "note.html"
    NOTES_TEMPLATE = "notes.html"

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self._templates = Jinja2Templates(directory=str(self.directory))

    def render_note(self, request: Request, note: Note) -> HTMLResponse:
        return self._templates.TemplateResponse(
            request, self.NOTE_TEMPLATE, {"note": note}
        )

    def render_notes(self, request: Request, notes: Sequence[Note]) -> HTMLResponse:
        return self._templates.TemplateResponse(
            request, self.NOTES_TEMPLATE, {"notes": list(notes)}
        )
