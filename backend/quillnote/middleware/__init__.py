# Middleware package init
"""
Quillnote Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive requests before any processing
    2. Request ID: correlation ID for logging and error bodies
    3. Logging: access line with status and duration
    4. GZip / CORS: Starlette's stock middleware
"""
