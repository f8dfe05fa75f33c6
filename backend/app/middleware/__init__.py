# Middleware package init
"""
DevConnect Backend — Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit: reject abusive clients before any other work
    2. Request ID: set the correlation ID used by every later log line
    3. Logging: one access-log line with status and duration
"""
