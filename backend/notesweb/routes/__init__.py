# Routes package init
"""
Notes Web — Routes Package
===========================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notes.py:   GET /notes                 (listing of all notes, HTML)
                  GET /notes?note_id=<id>    (single note, HTML)
    - health.py:  GET /healthz               (service health check, JSON)
    - static.py:  GET /static/<file>.css     (stylesheets only)

Design Principle:
    Routes stay thin: read the query string, call the NoteStore, hand the
    result to the NoteRenderer. Errors are mapped to responses in main.py.
"""
