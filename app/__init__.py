"""
Roster Backend — Application Package Initializer
================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn app.main:app`), pytest and the route modules.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (StudentRegistry)        │  ← Validation and in-memory state
    ├─────────────────────────────────────┤
    │        Schemas (Pydantic)           │  ← API contracts
    └─────────────────────────────────────┘

    Routes translate status codes and headers; the registry holds the rules
    and can be exercised without HTTP.
"""

__version__ = "1.0.0"
