"""
Roster Backend — Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract for the student roster.
How:   StudentRegistry validates payloads against StudentPayload; FastAPI uses
       Student, ErrorResponse and HealthResponse to serialize responses and
       generate the OpenAPI document.

Design Decision:
    StudentPayload is validated by the registry rather than by FastAPI's body
    parsing, so every malformed body is reported as a 400 with the same error
    shape instead of FastAPI's default 422.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What clients send
# ══════════════════════════════════════════════════════════════════════════


class StudentPayload(BaseModel):
    """
    What:  Body of POST /students and PUT /students/{id}.

    Rules:
        - name: a string that is non-empty after trimming; stored trimmed
        - group: a string, empty allowed; stored as given
        - strict types: 123, true or null are rejected, not coerced
        - unknown keys are ignored
    """
    name: str = Field(description="Student name, surrounding whitespace is trimmed")
    group: str = Field(description="Free-form group label (may be empty)")

    model_config = {"strict": True, "extra": "ignore"}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Trims the name and rejects blank values."""
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("name must not be blank")
        return trimmed


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class Student(BaseModel):
    """
    What:  A stored student record.
    Who:   Returned by every /students endpoint except DELETE.
    """
    id: int = Field(description="Registry-assigned identifier, strictly increasing")
    name: str = Field(description="Trimmed student name")
    group: str = Field(description="Group label")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "student with ID '7' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Always 'ok' while the process is serving")
    time: datetime = Field(description="Current server time (UTC ISO 8601)")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
