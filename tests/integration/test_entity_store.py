"""
Integration tests for EntityStore

Tests identity assignment, merged-record validation on update and no-op deletes.
"""
import pytest
from datetime import date

from registrar.exceptions import NotFound, ValidationError
from registrar.models import Student
from registrar.services.entity_store import course_store, enrollment_store, student_store


@pytest.mark.asyncio
async def test_create_then_get_returns_input_plus_id(session_factory):
    """Stored record equals the input plus an assigned id"""
    fields = {
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@navy.mil",
        "date_of_birth": date(1906, 12, 9),
    }

    async with session_factory() as session, session.begin():
        created = await student_store.create(session, fields)

    async with session_factory() as session:
        stored = await student_store.get(session, created.id)

    assert stored.id is not None
    assert {field: getattr(stored, field) for field in fields} == fields


@pytest.mark.asyncio
async def test_ids_are_unique_and_ordered(session_factory):
    async with session_factory() as session, session.begin():
        first = await course_store.create(session, {"title": "Algorithms"})
        second = await course_store.create(session, {"title": "Databases"})

    assert first.id != second.id

    async with session_factory() as session:
        courses = await course_store.list(session)

    assert [c.id for c in courses] == sorted([first.id, second.id])


@pytest.mark.asyncio
async def test_invalid_create_writes_nothing(session_factory):
    with pytest.raises(ValidationError):
        async with session_factory() as session, session.begin():
            await course_store.create(session, {"title": "Algorithms", "credits": 11})

    async with session_factory() as session:
        assert await course_store.list(session) == []


@pytest.mark.asyncio
async def test_update_merges_patch(session_factory):
    async with session_factory() as session, session.begin():
        student = await student_store.create(session, {"first_name": "Alan", "last_name": "Turing"})

    async with session_factory() as session, session.begin():
        updated = await student_store.update(session, student.id, {"email": "alan@bletchley.uk"})

    assert updated.first_name == "Alan"
    assert updated.email == "alan@bletchley.uk"


@pytest.mark.asyncio
async def test_update_validates_merged_record(session_factory):
    async with session_factory() as session, session.begin():
        course = await course_store.create(session, {"title": "Algorithms", "credits": 5})

    with pytest.raises(ValidationError) as exc_info:
        async with session_factory() as session, session.begin():
            await course_store.update(session, course.id, {"credits": 42})
    assert exc_info.value.fields == ["credits"]

    async with session_factory() as session:
        stored = await course_store.get(session, course.id)
    assert stored.credits == 5


@pytest.mark.asyncio
async def test_update_missing_record_raises_not_found(session_factory):
    with pytest.raises(NotFound):
        async with session_factory() as session, session.begin():
            await student_store.update(session, 999, {"first_name": "Nobody"})


@pytest.mark.asyncio
async def test_enrollment_references_are_immutable(session_factory):
    async with session_factory() as session, session.begin():
        student = await student_store.create(session, {"first_name": "Ada", "last_name": "Lovelace"})
        course = await course_store.create(session, {"title": "Analysis"})
        enrollment = await enrollment_store.create(
            session, {"student_id": student.id, "course_id": course.id}
        )

    with pytest.raises(ValidationError) as exc_info:
        async with session_factory() as session, session.begin():
            await enrollment_store.update(session, enrollment.id, {"course_id": course.id + 1})
    assert exc_info.value.fields == ["course_id"]


@pytest.mark.asyncio
async def test_delete_absent_id_is_noop(session_factory):
    async with session_factory() as session, session.begin():
        removed = await student_store.delete(session, 12345)

    assert removed is False

    async with session_factory() as session:
        assert await session.get(Student, 12345) is None


@pytest.mark.asyncio
async def test_mixed_case_email_round_trips(session_factory):
    """Email is stored exactly as entered, domain case included"""
    async with session_factory() as session, session.begin():
        created = await student_store.create(
            session, {"first_name": "Ada", "last_name": "Lovelace", "email": "Ada@ANALYTICAL.ORG"}
        )

    async with session_factory() as session:
        stored = await student_store.get(session, created.id)

    assert stored.email == "Ada@ANALYTICAL.ORG"


@pytest.mark.asyncio
@pytest.mark.parametrize("store,fields", [
    (student_store, {"first_name": "Ada", "last_name": "Lovelace"}),
    (course_store, {"title": "Data Structures"}),
])
async def test_deleted_ids_are_not_reused(session_factory, store, fields):
    """Deleting the newest row never hands its id to the next create"""
    async with session_factory() as session, session.begin():
        first = await store.create(session, fields)
    async with session_factory() as session, session.begin():
        await store.delete(session, first.id)
    async with session_factory() as session, session.begin():
        second = await store.create(session, fields)

    assert second.id != first.id


@pytest.mark.asyncio
async def test_deleted_enrollment_ids_are_not_reused(session_factory):
    async with session_factory() as session, session.begin():
        student = await student_store.create(session, {"first_name": "Ada", "last_name": "Lovelace"})
        course = await course_store.create(session, {"title": "Data Structures"})
        first = await enrollment_store.create(session, {"student_id": student.id, "course_id": course.id})
    async with session_factory() as session, session.begin():
        await enrollment_store.delete(session, first.id)
    async with session_factory() as session, session.begin():
        second = await enrollment_store.create(session, {"student_id": student.id, "course_id": course.id})

    assert second.id != first.id
