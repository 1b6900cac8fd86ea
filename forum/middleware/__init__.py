"""
Forum — Middleware Package
===========================

Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Session] → [Method Override] → Route

    1. Request ID first, so every later log line can carry it
    2. Logging measures everything below it, including session decoding
    3. Session (Starlette) decodes the signed cookie into request.session
    4. Method override rewrites POST+?_method=... right before routing
"""
