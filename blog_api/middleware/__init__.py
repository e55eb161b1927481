"""
Blog API — Middleware Package
==============================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so every later log line can carry it
    2. Access log sees the final status and Content-Length, after the
       exception handlers have run
"""
