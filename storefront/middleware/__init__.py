# Middleware package init
"""
Storefront API — Middleware Package
=====================================

What:  Cross-cutting concerns, in two layers.

Application middleware (every request, outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Router

Route guards (FastAPI dependencies attached per API version, in order):
    Router → [Rate Limit] → [Auth (v2 only)] → Handler

    Guards raise RateLimitExceededError / UnauthorizedError to short circuit;
    the global exception handlers turn those into 429 / 401.
"""
