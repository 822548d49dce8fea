"""
Roster Backend — Student Route Handlers
=========================================

What:  CRUD endpoints for the in-memory student roster.
How:   Each handler pulls the request data, delegates to StudentRegistry and
       sets the status code/headers. Errors raised by the registry are turned
       into JSON responses by the global handlers in main.py.
Who:   Called by trainees' frontends and the black-box test suites.

Endpoints:
    GET    /students          → 200, list of records (X-Total-Count header)
    POST   /students          → 201, created record (Location header) | 400
    GET    /students/{id}     → 200, record | 404
    PUT    /students/{id}     → 200, updated record | 400 | 404
    DELETE /students/{id}     → 204, empty body | 404
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Response, status

from app.dependencies import get_registry
from app.schemas.student import ErrorResponse, Student
from app.services.student_registry import StudentRegistry

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/students", tags=["Students"])

# The body is taken as raw JSON and validated by the registry, so the
# documented shape is attached here for the OpenAPI schema only.
_PAYLOAD_EXAMPLES = {
    "valid": {
        "summary": "Valid student",
        "value": {"name": "Ana", "group": "G1"},
    },
    "blank_name": {
        "summary": "Rejected: blank name",
        "value": {"name": "  ", "group": "G1"},
    },
}


@router.get(
    "",
    response_model=List[Student],
    summary="List all students",
    description="Returns every student in insertion order. No pagination.",
)
async def list_students(
    response: Response,
    registry: StudentRegistry = Depends(get_registry),
) -> List[Student]:
    students = registry.list_students()
    response.headers["X-Total-Count"] = str(len(students))
    return students


@router.post(
    "",
    response_model=Student,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Student created", "model": Student},
        400: {"description": "Invalid student payload", "model": ErrorResponse},
    },
    summary="Create a student",
)
async def create_student(
    response: Response,
    payload: Any = Body(
        default=None,
        description="JSON object with string fields `name` (non-blank) and `group`",
        openapi_examples=_PAYLOAD_EXAMPLES,
    ),
    registry: StudentRegistry = Depends(get_registry),
) -> Student:
    """
    Create a student and return it with its newly assigned id.

    The Location header points at GET /students/{id} for the new record.
    """
    student = registry.create_student(payload)
    response.headers["Location"] = f"{router.prefix}/{student.id}"
    return student


@router.get(
    "/{student_id}",
    response_model=Student,
    responses={
        200: {"description": "The student", "model": Student},
        404: {"description": "Student not found", "model": ErrorResponse},
    },
    summary="Get a student by id",
)
async def get_student(
    student_id: int,
    registry: StudentRegistry = Depends(get_registry),
) -> Student:
    return registry.get_student(student_id)


@router.put(
    "/{student_id}",
    response_model=Student,
    responses={
        200: {"description": "Student updated", "model": Student},
        400: {"description": "Invalid student payload", "model": ErrorResponse},
        404: {"description": "Student not found", "model": ErrorResponse},
    },
    summary="Replace a student's name and group",
)
async def update_student(
    student_id: int,
    payload: Any = Body(
        default=None,
        description="JSON object with string fields `name` (non-blank) and `group`",
        openapi_examples=_PAYLOAD_EXAMPLES,
    ),
    registry: StudentRegistry = Depends(get_registry),
) -> Student:
    """
    Full replacement of name and group; the id never changes.

    An unknown id is reported as 404 even if the body is also invalid.
    """
    return registry.update_student(student_id, payload)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        204: {"description": "Student deleted"},
        404: {"description": "Student not found", "model": ErrorResponse},
    },
    summary="Delete a student",
)
async def delete_student(
    student_id: int,
    registry: StudentRegistry = Depends(get_registry),
) -> Response:
    registry.delete_student(student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
