# Middleware package init
"""
Artfolio Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and every service log
    line of the request share the same correlation id. Responses pass back
    through the chain in reverse, which is where the X-Request-ID header
    and the duration are added.
"""
