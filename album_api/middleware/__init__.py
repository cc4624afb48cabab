"""
Album API: Middleware Package
==============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    The request ID is set first so the access log line and any error
    response for the request carry it.
"""
