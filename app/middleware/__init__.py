# Middleware package init
"""
Roster Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive requests before any processing
    2. Request ID: generate the correlation ID used by logs and error bodies
    3. Logging: access line with status and duration
    4. CORS: FastAPI's CORSMiddleware (handles preflight)

    Responses travel the chain in reverse, so the Request ID header is set
    on every response, including error responses produced by handlers.
"""
