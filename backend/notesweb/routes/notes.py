"""
Notes Web — Notes Route Handler
================================

What:  Handles GET /notes (listing) and GET /notes?note_id=<id> (one note).
How:   Reads the `note_id` query parameter, asks the NoteStore for one note
       or all notes, and hands the result to the NoteRenderer.
Who:   Browsers following links from the listing page.

Error mapping (see main.register_exception_handlers):
    NotFoundError   → 404 "error: note with ID '<id>' was not found"
    StorageError    → 500 "error: <message>"

    The handler itself does not catch anything; store errors propagate to
    the global handlers, which log them and write a plain-text body.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from starlette.responses import HTMLResponse

from notesweb.deps import get_renderer, get_store
from notesweb.services.note_store import NoteStore
from notesweb.services.renderer import NoteRenderer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


@router.get(
    "/notes",
    response_class=HTMLResponse,
    responses={
        200: {"description": "Rendered note or note listing"},
        404: {"description": "No note with that ID (plain text)"},
        500: {"description": "Store failure (plain text)"},
    },
    summary="Show one note or list every note",
)
async def show_notes(
    request: Request,
    note_id: Optional[str] = Query(
        default=None,
        description="ID of the note to show. Omit (or leave empty) to list all notes.",
    ),
    store: NoteStore = Depends(get_store),
    renderer: NoteRenderer = Depends(get_renderer),
) -> HTMLResponse:
    # An empty ?note_id= behaves like no parameter at all
    if not note_id:
        notes = await store.get_notes()
        logger.debug("Rendering %d notes", len(notes))
        return renderer.render_notes(request, notes)

    note = await store.get_note(note_id)
    return renderer.render_note(request, note)
