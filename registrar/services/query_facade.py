"""
Query Facade

Read-only projections over students, courses and enrollments. Joined
projections are fetched with a single statement so a concurrent cascade
is observed either entirely or not at all.
"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from registrar.exceptions import NotFound
from registrar.models import Course, Enrollment, Student
from registrar.schemas import (
    CourseRead,
    CourseWithEnrollments,
    EnrollmentRead,
    StudentRead,
    StudentWithEnrollments,
)
from registrar.services.entity_store import course_store, enrollment_store, student_store

logger = logging.getLogger(__name__)


class QueryFacade:
    """Lists, lookups and parent-with-enrollments joins. Never writes"""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def list_students(self) -> List[StudentRead]:
        async with self._session_factory() as session:
            rows = await student_store.list(session)
        return [StudentRead.model_validate(row) for row in rows]

    async def list_courses(self) -> List[CourseRead]:
        async with self._session_factory() as session:
            rows = await course_store.list(session)
        return [CourseRead.model_validate(row) for row in rows]

    async def list_enrollments(self) -> List[EnrollmentRead]:
        async with self._session_factory() as session:
            rows = await enrollment_store.list(session)
        return [EnrollmentRead.model_validate(row) for row in rows]

    async def get_student(self, student_id: int) -> StudentRead:
        async with self._session_factory() as session:
            row = await student_store.get(session, student_id)
        if row is None:
            raise NotFound("student", student_id)
        return StudentRead.model_validate(row)

    async def get_course(self, course_id: int) -> CourseRead:
        async with self._session_factory() as session:
            row = await course_store.get(session, course_id)
        if row is None:
            raise NotFound("course", course_id)
        return CourseRead.model_validate(row)

    async def get_enrollment(self, enrollment_id: int) -> EnrollmentRead:
        async with self._session_factory() as session:
            row = await enrollment_store.get(session, enrollment_id)
        if row is None:
            raise NotFound("enrollment", enrollment_id)
        return EnrollmentRead.model_validate(row)

    async def get_student_with_enrollments(self, student_id: int) -> StudentWithEnrollments:
        """
        Get a student together with its enrollments.

        Returns:
            StudentWithEnrollments: Student fields plus enrollments ordered by id

        Raises:
            NotFound: If the student does not exist
        """
        stmt = (
            select(Student, Enrollment)
            .outerjoin(Enrollment, Enrollment.student_id == Student.id)
            .where(Student.id == student_id)
            .order_by(Enrollment.id)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        if not rows:
            raise NotFound("student", student_id)

        student = StudentRead.model_validate(rows[0][0])
        return StudentWithEnrollments(
            **student.model_dump(),
            enrollments=[EnrollmentRead.model_validate(e) for _, e in rows if e is not None],
        )

    async def get_course_with_enrollments(self, course_id: int) -> CourseWithEnrollments:
        """
        Get a course together with its enrollments.

        Returns:
            CourseWithEnrollments: Course fields plus enrollments ordered by id

        Raises:
            NotFound: If the course does not exist
        """
        stmt = (
            select(Course, Enrollment)
            .outerjoin(Enrollment, Enrollment.course_id == Course.id)
            .where(Course.id == course_id)
            .order_by(Enrollment.id)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        if not rows:
            raise NotFound("course", course_id)

        course = CourseRead.model_validate(rows[0][0])
        return CourseWithEnrollments(
            **course.model_dump(),
            enrollments=[EnrollmentRead.model_validate(e) for _, e in rows if e is not None],
        )
