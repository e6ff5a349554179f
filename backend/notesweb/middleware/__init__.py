# Middleware package init
"""
Notes Web — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: pick up or generate the correlation ID
    2. Logging: time the request and write the access line with that ID

    Responses travel back the same way, so the X-Request-Id header is
    added after the access line has been written.
"""
