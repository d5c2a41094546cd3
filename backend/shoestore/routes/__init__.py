# Routes package init
"""
Shoe Store Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - shoes.py:   POST   /create
                  GET    /getall
                  GET    /getbyid?id=
                  PUT    /update?id=
                  DELETE /delete?id=
    - health.py:  GET    /health

Design Principle:
    Routes are THIN: extract query params and body, call ShoeService,
    return the result. Status codes for failures come from the global
    exception handlers in main.py.
"""
