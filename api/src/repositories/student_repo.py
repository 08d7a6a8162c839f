"""
Student repository for database operations.

Owns the SQL for the ``students`` table and converts rows into ``Student``
entities. Every method issues exactly one gateway call.
"""

import structlog
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from api.src.errors import StoreError
from api.src.models.student import Student, StudentCreateRequest, StudentUpdateRequest
from api.src.repositories.database import Database, store_errors

logger = structlog.get_logger(__name__)


class StudentRepository:
    """Repository for student database operations."""

    def __init__(self, db: Database):
        """
        Initialize student repository.

        Args:
            db: Persistence gateway
        """
        self.db = db

    @staticmethod
    def _to_student(row: Mapping[str, Any]) -> Student:
        try:
            return Student.model_validate(dict(row))
        except (ValidationError, TypeError, ValueError) as e:
            logger.error("student_row_invalid", error=str(e))
            raise StoreError("Failed to parse student record") from e

    async def list_students(self) -> List[Student]:
        """
        List all students.

        Returns:
            Students in store order; empty list when there are none

        Raises:
            StoreError: On query failure or an unreadable row
        """
        with store_errors("Failed to fetch students", "student_list_failed"):
            rows = await self.db.fetch_all("SELECT id, name, age, email FROM students")

        # One bad row fails the whole listing.
        return [self._to_student(row) for row in rows]

    async def create_student(self, request: StudentCreateRequest) -> Student:
        """
        Insert a student and return it with its assigned id.

        Args:
            request: Validated create payload

        Returns:
            Created student

        Raises:
            StoreError: On insert failure
        """
        with store_errors("Failed to create student", "student_create_failed", email=request.email):
            row = await self.db.fetch_one(
                "INSERT INTO students (name, age, email) VALUES ($1, $2, $3) RETURNING id",
                request.name,
                request.age,
                request.email
            )

        if row is None:
            logger.error("student_create_no_id", email=request.email)
            raise StoreError("Failed to create student")

        student = self._to_student({
            "id": row.get("id"),
            "name": request.name,
            "age": request.age,
            "email": request.email
        })

        logger.info("student_created", student_id=student.id)
        return student

    async def get_student(self, student_id: int) -> Optional[Student]:
        """
        Get student by ID.

        Args:
            student_id: Student ID

        Returns:
            Student or None if not found
        """
        with store_errors("Failed to fetch student", "student_get_failed", student_id=student_id):
            row = await self.db.fetch_one(
                "SELECT id, name, age, email FROM students WHERE id = $1",
                student_id
            )

        if row is None:
            logger.debug("student_not_found", student_id=student_id)
            return None

        return self._to_student(row)

    async def update_student(
        self,
        student_id: int,
        request: StudentUpdateRequest
    ) -> Optional[Student]:
        """
        Replace name, age and email of a student.

        Args:
            student_id: Student ID
            request: Validated update payload

        Returns:
            Row as stored after the update, or None if not found
        """
        with store_errors("Failed to update student", "student_update_failed", student_id=student_id):
            row = await self.db.fetch_one(
                """
                UPDATE students
                SET name = $1, age = $2, email = $3
                WHERE id = $4
                RETURNING id, name, age, email
                """,
                request.name,
                request.age,
                request.email,
                student_id
            )

        if row is None:
            logger.debug("student_not_found", student_id=student_id)
            return None

        logger.info("student_updated", student_id=student_id)
        return self._to_student(row)

    async def delete_student(self, student_id: int) -> bool:
        """
        Delete student.

        Args:
            student_id: Student ID

        Returns:
            True if deleted, False if not found
        """
        with store_errors("Failed to delete student", "student_delete_failed", student_id=student_id):
            affected = await self.db.execute("DELETE FROM students WHERE id = $1", student_id)

        deleted = affected > 0
        if deleted:
            logger.info("student_deleted", student_id=student_id)
        else:
            logger.debug("student_not_found", student_id=student_id)

        return deleted
