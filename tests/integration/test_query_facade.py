"""
Integration tests for QueryFacade

Tests ordering, joined projections and NotFound handling.
"""
import pytest

from registrar.exceptions import NotFound


class TestLists:

    async def test_empty_lists(self, queries):
        assert await queries.list_students() == []
        assert await queries.list_courses() == []
        assert await queries.list_enrollments() == []

    async def test_lists_ordered_by_id(self, enforcer, queries):
        created = [
            await enforcer.create_student({"first_name": name, "last_name": "Test"})
            for name in ("Zed", "Amy", "Kim")
        ]

        listed = await queries.list_students()

        assert [s.id for s in listed] == sorted(s.id for s in created)
        assert [s.first_name for s in listed] == ["Zed", "Amy", "Kim"]


class TestJoinedProjections:

    async def test_student_with_enrollments(self, enforcer, queries, ada, data_structures):
        compilers = await enforcer.create_course({"title": "Compilers"})
        first = await enforcer.create_enrollment(ada.id, data_structures.id, grade=95)
        second = await enforcer.create_enrollment(ada.id, compilers.id)

        student = await queries.get_student_with_enrollments(ada.id)

        assert student.id == ada.id
        assert student.first_name == "Ada"
        assert [e.id for e in student.enrollments] == [first.id, second.id]
        assert student.enrollments[0].grade == 95

    async def test_student_without_enrollments(self, queries, ada):
        student = await queries.get_student_with_enrollments(ada.id)

        assert student.enrollments == []

    async def test_course_with_enrollments(self, enforcer, queries, ada, data_structures):
        grace = await enforcer.create_student({"first_name": "Grace", "last_name": "Hopper"})
        await enforcer.create_enrollment(grace.id, data_structures.id)
        await enforcer.create_enrollment(ada.id, data_structures.id)

        course = await queries.get_course_with_enrollments(data_structures.id)

        assert course.credits == 4
        assert [e.student_id for e in course.enrollments] == [grace.id, ada.id]

    async def test_missing_parents_raise_not_found(self, queries):
        with pytest.raises(NotFound):
            await queries.get_student_with_enrollments(999)
        with pytest.raises(NotFound):
            await queries.get_course_with_enrollments(999)


class TestLookups:

    async def test_get_records(self, enforcer, queries, ada, data_structures):
        enrollment = await enforcer.create_enrollment(ada.id, data_structures.id)

        assert (await queries.get_student(ada.id)).last_name == "Lovelace"
        assert (await queries.get_course(data_structures.id)).title == "Data Structures"
        assert (await queries.get_enrollment(enrollment.id)).course_id == data_structures.id

    async def test_missing_records_raise_not_found(self, queries):
        for lookup in (queries.get_student, queries.get_course, queries.get_enrollment):
            with pytest.raises(NotFound):
                await lookup(1)
