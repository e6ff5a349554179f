# Services package init
"""
Notes Web — Services Layer
===========================

What:  The components route handlers depend on.

Service Inventory:
    - NoteStore:    storage gateway, owns the database engine
    - NoteRenderer: turns notes into HTML responses (Jinja2 templates)

Both are built once per application by create_app() and reached through
the dependencies in notesweb.deps.
"""
