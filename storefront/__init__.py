"""
Storefront API — Application Package Initializer
==================================================

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Routes + Guards (API Layer)       │  ← HTTP concerns, rate limit, auth
    ├─────────────────────────────────────┤
    │   Services (store adapters, auth)   │  ← one store call per operation
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (Persistence)            │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
