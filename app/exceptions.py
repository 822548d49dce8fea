"""
Roster Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the registry and the HTTP layer.
How:   Each exception class carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by StudentRegistry; caught by the handlers in main.py.

Exception Hierarchy:
    RosterError (base)        → 500 Internal Server Error
    ├── ValidationError       → 400 Bad Request (client can fix)
    └── NotFoundError         → 404 Not Found
"""

from typing import Any, Dict, List, Optional


class RosterError(Exception):
    """
    Base exception for all Roster application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional detail; returned only by handlers that choose to
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RosterError):
    """
    Raised when a student payload fails validation.

    When:    Missing name/group, non-string values, blank name, body that is
             not a JSON object.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Invalid student payload",
            "details": {"fields": ["name"]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if fields:
            ctx["fields"] = fields
        super().__init__(message=message, context=ctx)
        self.field = field
        self.fields = fields or ([field] if field else [])


class NotFoundError(RosterError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /students/{id} with an id that was never issued
             or has been deleted.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id
