# Routes package init
"""
Roster Backend — API Routes Package
=====================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - students.py: GET/POST   /students
                   GET/PUT/DELETE /students/{id}
    - health.py:   GET  /health
    - testing.py:  DELETE /__test__/reset   (only when expose_test_routes)

Routes stay thin: pull data out of the request, call StudentRegistry, set
status codes and headers. Validation and state live in the registry.
"""
