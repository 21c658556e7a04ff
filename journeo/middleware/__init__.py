# Middleware package init
"""
Journeo Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied around every request.

Middleware Chain (outermost first):
    Request → [Login Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Login rate limit first: throttled attempts never reach the database
    2. Request ID: correlation id for every later log line
    3. Logging: sees the final status and total duration
"""
