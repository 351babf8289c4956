# Middleware package init
"""
Bulletin Board API — Middleware Package
=========================================

What:  Cross-cutting concerns for the HTTP surface (bulletin.main).
       The Lambda entry point does not use these; the router binds the
       request ID and logs each dispatch itself.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line carries the ID.
"""
