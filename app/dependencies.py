"""
Roster Backend — FastAPI Dependencies
=======================================

What:  Dependency providers injected into route handlers with Depends().
How:   The registry instance is created by create_app() and stored on
       app.state; handlers receive it per request through get_registry().
Who:   Used by app/routes/students.py and app/routes/testing.py.

Why not a module-level singleton:
    Every app built by create_app() owns a separate registry, so tests get
    a clean roster by building a new app instead of calling a reset endpoint.
"""

from fastapi import Request

from app.services.student_registry import StudentRegistry


def get_registry(request: Request) -> StudentRegistry:
    """
    Provide the registry owned by the application handling this request.

    Usage in routes:
        @router.get("/students")
        async def list_students(registry: StudentRegistry = Depends(get_registry)):
            ...
    """
    return request.app.state.registry
