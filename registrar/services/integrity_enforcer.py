"""
Integrity Enforcer

Sole entry point for every mutation of students, courses and enrollments.
Each operation runs as one transaction under a process-wide mutation lock:
reference checks, the duplicate-pair check, cascades and the write they
guard either all commit or all roll back.

Invariants held after every committed operation:
- every enrollment references an existing student and course
- no two enrollments share a (student, course) pair
- deleting a student or course removes its enrollments
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from registrar.exceptions import DanglingReference, DuplicateEnrollment, NotFound
from registrar.schemas import CourseRead, EnrollmentRead, StudentRead
from registrar.services.entity_store import (
    EntityStore,
    course_store,
    enrollment_store,
    student_store,
)

logger = logging.getLogger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message or "uq_enrollments_student_course" in message


class IntegrityEnforcer:
    """Validates cross-entity rules, then delegates writes to the entity stores"""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        students: EntityStore = student_store,
        courses: EntityStore = course_store,
        enrollments: EntityStore = enrollment_store,
    ):
        self._session_factory = session_factory
        self.students = students
        self.courses = courses
        self.enrollments = enrollments
        self._lock = asyncio.Lock()

    # Students and courses

    async def create_student(self, fields: Dict[str, Any]) -> StudentRead:
        async with self._lock:
            async with self._session_factory() as session, session.begin():
                row = await self.students.create(session, fields)
                student = StudentRead.model_validate(row)

        logger.info(f"Created student {student.id}")
        return student

    async def update_student(self, student_id: int, patch: Dict[str, Any]) -> StudentRead:
        async with self._lock:
            async with self._session_factory() as session, session.begin():
                row = await self.students.update(session, student_id, patch)
                return StudentRead.model_validate(row)

    async def create_course(self, fields: Dict[str, Any]) -> CourseRead:
        async with self._lock:
            async with self._session_factory() as session, session.begin():
                row = await self.courses.create(session, fields)
                course = CourseRead.model_validate(row)

        logger.info(f"Created course {course.id}")
        return course

    async def update_course(self, course_id: int, patch: Dict[str, Any]) -> CourseRead:
        async with self._lock:
            async with self._session_factory() as session, session.begin():
                row = await self.courses.update(session, course_id, patch)
                return CourseRead.model_validate(row)

    # Enrollments

    async def create_enrollment(
        self,
        student_id: int,
        course_id: int,
        grade: Optional[int] = None,
    ) -> EnrollmentRead:
        """
        Enroll a student in a course.

        Args:
            student_id: Existing student id
            course_id: Existing course id
            grade: Optional grade, 0-100

        Returns:
            EnrollmentRead: The stored enrollment

        Raises:
            DanglingReference: If the student and/or course does not exist
            DuplicateEnrollment: If the pair is already enrolled
            ValidationError: If grade is out of bounds
        """
        try:
            async with self._lock:
                async with self._session_factory() as session, session.begin():
                    # Lock order: student -> course -> enrollment
                    student = await self.students.get(session, student_id, for_update=True)
                    course = await self.courses.get(session, course_id, for_update=True)

                    missing = {}
                    if student is None:
                        missing["student_id"] = student_id
                    if course is None:
                        missing["course_id"] = course_id
                    if missing:
                        raise DanglingReference(missing)

                    existing = await self.enrollments.find_one(
                        session, student_id=student_id, course_id=course_id
                    )
                    if existing is not None:
                        raise DuplicateEnrollment(student_id, course_id)

                    row = await self.enrollments.create(
                        session,
                        {"student_id": student_id, "course_id": course_id, "grade": grade},
                    )
                    enrollment = EnrollmentRead.model_validate(row)
        except (DanglingReference, DuplicateEnrollment) as e:
            logger.warning(f"Enrollment rejected: {e.message}")
            raise
        except IntegrityError as e:
            # Another process committed the same pair between our check and insert
            if _is_unique_violation(e):
                logger.warning(
                    f"Enrollment rejected by unique constraint: student={student_id}, course={course_id}"
                )
                raise DuplicateEnrollment(student_id, course_id) from e
            raise

        logger.info(f"Enrolled student {student_id} in course {course_id} (enrollment {enrollment.id})")
        return enrollment

    async def update_enrollment_grade(self, enrollment_id: int, grade: Optional[int]) -> EnrollmentRead:
        """
        Set or clear an enrollment's grade.

        Raises:
            NotFound: If the enrollment does not exist
            ValidationError: If grade is out of bounds
        """
        async with self._lock:
            async with self._session_factory() as session, session.begin():
                row = await self.enrollments.update(session, enrollment_id, {"grade": grade})
                return EnrollmentRead.model_validate(row)

    async def delete_enrollment(self, enrollment_id: int) -> None:
        async with self._lock:
            async with self._session_factory() as session, session.begin():
                if not await self.enrollments.delete(session, enrollment_id):
                    raise NotFound("enrollment", enrollment_id)

        logger.info(f"Deleted enrollment {enrollment_id}")

    # Cascading deletes

    async def delete_student(self, student_id: int) -> int:
        """
        Delete a student and every enrollment referencing it.

        Returns:
            int: Number of enrollments removed

        Raises:
            NotFound: If the student does not exist
        """
        return await self._cascade_delete(self.students, "student_id", student_id)

    async def delete_course(self, course_id: int) -> int:
        """
        Delete a course and every enrollment referencing it.

        Returns:
            int: Number of enrollments removed

        Raises:
            NotFound: If the course does not exist
        """
        return await self._cascade_delete(self.courses, "course_id", course_id)

    async def _cascade_delete(self, parents: EntityStore, reference_field: str, parent_id: int) -> int:
        async with self._lock:
            async with self._session_factory() as session, session.begin():
                parent = await parents.get(session, parent_id, for_update=True)
                if parent is None:
                    raise NotFound(parents.name, parent_id)

                # Dependents first, then the parent, in the same transaction
                removed = await self.enrollments.delete_where(session, **{reference_field: parent_id})
                await parents.delete(session, parent_id)

        logger.info(f"Deleted {parents.name} {parent_id} and {removed} enrollment(s)")
        return removed
