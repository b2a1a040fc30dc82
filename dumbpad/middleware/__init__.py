# Middleware package init
"""
DumbPad Backend — Middleware Package
======================================

Middleware Chain (request order):
    Request → [CORS] → [Request ID] → [Logging] → [PIN Gate] → Route Handler

    1. CORS outermost: every response, including gate denials, carries CORS headers
    2. Request ID: correlation ID for logs and error bodies
    3. Logging: one access line per request, gate denials included
    4. PIN Gate: rejects gated /api requests without a valid X-Pin header
"""
