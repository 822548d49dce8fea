# Services package init
"""
Roster Backend — Services Layer
=================================

What:  Business logic layer sitting between routes (HTTP) and state.
How:   Services accept plain Python values, apply the domain rules, and
       return schema objects or raise app.exceptions errors.

Service Inventory:
    - StudentRegistry: in-memory student table with validation and CRUD

Routes obtain the registry through app.dependencies.get_registry, so each
FastAPI app instance owns its own registry.
"""
