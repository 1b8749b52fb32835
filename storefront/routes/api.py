"""
Storefront API — Versioned Route Table
========================================

What:  Mounts every router under each API version with that version's
       guard chain.
How:   `include_router(..., dependencies=guards)` prepends the guards to each
       route's own dependencies. FastAPI resolves them in list order before
       the handler's parameters (including the DB session), so a guard that
       raises short circuits the request before any store work happens.

Guard chains:
    /api/v1  resources: rate limit
    /api/v2  resources: rate limit → auth
    both     /users, /login, /logout: none

Routes are matched in registration order; the first match wins.
"""

from typing import Dict, List

from fastapi import Depends, FastAPI

from storefront.middleware.auth import require_auth
from storefront.middleware.rate_limit import enforce_rate_limit
from storefront.routes import auth, customers, health, orders, products, users

API_VERSIONS: Dict[str, List] = {
    "/api/v1": [Depends(enforce_rate_limit)],
    "/api/v2": [Depends(enforce_rate_limit), Depends(require_auth)],
}

RESOURCE_ROUTERS = (orders.router, products.router, customers.router)
ACCOUNT_ROUTERS = (users.router, auth.router)


def register_routes(app: FastAPI) -> None:
    for prefix, guards in API_VERSIONS.items():
        for router in RESOURCE_ROUTERS:
            app.include_router(router, prefix=prefix, dependencies=guards)
        for router in ACCOUNT_ROUTERS:
            app.include_router(router, prefix=prefix)
    app.include_router(health.router)
