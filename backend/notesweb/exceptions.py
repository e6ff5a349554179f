"""
Notes Web — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions raised by the storage gateway.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return plain-text error bodies with the matching HTTP status code.
Who:   Raised by NoteStore; caught by the handlers in main.py.

Exception Hierarchy:
    NotesWebError (base)
    ├── StoreConnectionError  → 500 (fatal at startup)
    ├── ConstraintError       → 409 Conflict
    ├── NotFoundError         → 404 Not Found
    └── StorageError          → 500 Internal Server Error

The gateway never logs. It raises one of these, chained to the driver
exception, and the HTTP boundary decides what the user sees.
"""

from typing import Any, Dict, Optional


class NotesWebError(Exception):
    """
    Base exception for all Notes Web application errors.

    Attributes:
        message:  Human-readable error description (safe to return to the client)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class StoreConnectionError(NotesWebError):
    """
    Raised when the note store cannot be opened or closed.

    When:    Bad database URL, missing driver, unreadable/unwritable file,
             closing a store twice, or using a store that was never opened.
    HTTP:    500 Internal Server Error (at startup the process refuses to boot)
    """

    def __init__(
        self,
        message: str = "The note store is not available",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConstraintError(NotesWebError):
    """
    Raised when an insert violates a uniqueness or foreign-key constraint.

    When:    Primary-key collision on authors/notes, or a note whose author
             row does not exist.
    HTTP:    409 Conflict

    The transaction that raised it has already been rolled back; the store
    holds no partial row.
    """

    def __init__(
        self,
        message: str = "The record conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NotesWebError):
    """
    Raised when a requested resource does not exist.

    When:    GET /notes?note_id=<id> with an id that was never inserted.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(NotesWebError):
    """
    Raised when any other database operation fails.

    When:    Connection lost mid-query, locked database, malformed file, etc.
    HTTP:    500 Internal Server Error

    The driver error is kept in `__cause__` and `context`; it is logged
    server-side, never echoed to the client.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
