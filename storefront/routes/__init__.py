# Routes package init
"""
Storefront API — API Routes Package
=====================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory (each mounted under /api/v1 and /api/v2 by api.py):
    - products.py:   POST/PUT /products, GET /products, GET|DELETE /products/{id},
                     GET /products/q/{term}
    - customers.py:  same shape under /customers
    - orders.py:     POST /orders
    - users.py:      POST /users
    - auth.py:       POST /login, GET|POST /logout
    - health.py:     GET /health (unversioned)

Design Principle:
    Routes are THIN: parse the request, make one service call, return the
    record. Error mapping happens in the global exception handlers.
"""
