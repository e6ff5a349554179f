"""
Notes Web — Application Package Initializer
============================================

What: Marks the `notesweb` directory as a Python package.
Who:  Used by uvicorn (`notesweb.main:app`), by `python -m notesweb`, and by pytest.

Architecture Note:
    The application is a small layered stack:

    ┌─────────────────────────────────────┐
    │      Routes + Renderer (HTTP)       │  ← query params in, HTML out
    ├─────────────────────────────────────┤
    │       NoteStore (Gateway)           │  ← every read/write of the store
    ├─────────────────────────────────────┤
    │  Schemas (Entities) & Models (ORM)  │  ← Author/Note values, table mapping
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy, SQLite by default
    └─────────────────────────────────────┘

    Routes never touch SQLAlchemy directly; the gateway never touches HTTP.
"""

__version__ = "1.0.0"
