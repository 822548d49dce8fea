"""
Roster Backend — Student Registry (In-Memory CRUD)
====================================================

What:  Ordered, in-memory table of student records with create/read/update/
       delete operations keyed by a monotonically increasing integer id.
How:   Records live in a list (insertion order is the list order); ids come
       from a counter that only moves forward until reset().
Who:   Owned by the FastAPI app (app.state.registry) and handed to route
       handlers through get_registry(); unit tests construct it directly.
When:  One instance per application; state lives as long as the process.

Invariants:
    - every id in the table is unique and was issued by the counter
    - next_id is strictly greater than every id issued since the last reset
    - a failed operation leaves both the table and the counter untouched

Concurrency:
    Methods are synchronous and never yield, so when called from async route
    handlers each one completes before another request runs. No locking.
"""

import logging
from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from app.exceptions import NotFoundError, ValidationError
from app.schemas.student import Student, StudentPayload

logger = logging.getLogger(__name__)


class StudentRegistry:
    """
    In-memory store of student records.

    Responsibilities:
        - list_students(): snapshot of all records in insertion order
        - create_student(): validate, assign the next id, append
        - get_student(): single lookup with not-found handling
        - update_student(): replace name/group in place, keeping id and position
        - delete_student(): remove one record; its id is never reissued
        - reset(): test support, empties the table and restarts ids at 1
    """

    def __init__(self) -> None:
        self._records: List[Student] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    @property
    def next_id(self) -> int:
        """Id the next successful create will receive."""
        return self._next_id

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def validate_payload(payload: Any) -> StudentPayload:
        """
        Check a raw decoded JSON body against the student payload rule.

        Args:
            payload: Whatever the client sent (dict, list, None, scalar...)

        Returns:
            StudentPayload with the name already trimmed

        Raises:
            ValidationError: payload is not an object, or name/group are
                missing, not strings, or name is blank
        """
        if isinstance(payload, StudentPayload):
            # model_construct() instances skip validators; check them again
            payload = payload.model_dump()
        try:
            return StudentPayload.model_validate(payload)
        except PydanticValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise ValidationError(
                message="Invalid student payload",
                fields=fields or None,
                context={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    # ── Queries ───────────────────────────────────────────────────────────

    def list_students(self) -> List[Student]:
        return [record.model_copy() for record in self._records]

    def get_student(self, student_id: int) -> Student:
        """
        Raises:
            NotFoundError: no record with this id
        """
        return self._records[self._index_of(student_id)].model_copy()

    # ── Mutations ─────────────────────────────────────────────────────────

    def create_student(self, payload: Any) -> Student:
        """
        Validate the payload and append a new record.

        The counter is only advanced after validation succeeds, so a rejected
        payload never burns an id.

        Raises:
            ValidationError: invalid payload (nothing is stored)
        """
        data = self.validate_payload(payload)
        student = Student(id=self._next_id, name=data.name, group=data.group)
        self._next_id += 1
        self._records.append(student)
        logger.info("Student %d created (group=%r)", student.id, student.group)
        return student.model_copy()

    def update_student(self, student_id: int, payload: Any) -> Student:
        """
        Replace name and group of an existing record.

        Existence is checked before the payload, so an unknown id is reported
        as NotFoundError even when the payload is also invalid.

        Raises:
            NotFoundError: no record with this id
            ValidationError: invalid payload (record left unchanged)
        """
        index = self._index_of(student_id)
        data = self.validate_payload(payload)
        updated = Student(id=student_id, name=data.name, group=data.group)
        self._records[index] = updated
        logger.info("Student %d updated (group=%r)", student_id, updated.group)
        return updated.model_copy()

    def delete_student(self, student_id: int) -> None:
        """
        Raises:
            NotFoundError: no record with this id
        """
        index = self._index_of(student_id)
        del self._records[index]
        logger.info("Student %d deleted", student_id)

    def reset(self) -> None:
        """Empty the table and restart ids at 1. Test support only."""
        count = len(self._records)
        self._records.clear()
        self._next_id = 1
        logger.warning("Student registry reset (%d records dropped)", count)

    # ── Internals ─────────────────────────────────────────────────────────

    def _index_of(self, student_id: int) -> int:
        for index, record in enumerate(self._records):
            if record.id == student_id:
                return index
        raise NotFoundError(resource="student", resource_id=str(student_id))
