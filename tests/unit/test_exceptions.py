"""
Unit tests for registrar error kinds

Tests error codes and the {"error": {...}} envelope.
"""
from registrar.exceptions import (
    DanglingReference,
    DuplicateEnrollment,
    NotFound,
    RegistrarError,
    ValidationError,
)


def test_all_errors_share_base_class():
    errors = [
        ValidationError([{"field": "grade", "message": "too high"}]),
        NotFound("student", 1),
        DanglingReference({"student_id": 1}),
        DuplicateEnrollment(1, 2),
    ]

    for error in errors:
        assert isinstance(error, RegistrarError)


def test_validation_error_lists_fields():
    error = ValidationError(
        [{"field": "first_name", "message": "required"}, {"field": "email", "message": "invalid"}],
        entity="student",
    )

    assert error.fields == ["first_name", "email"]
    assert error.message == "Invalid student: first_name, email"
    assert error.to_dict()["error"]["code"] == "VALIDATION_ERROR"


def test_not_found_names_entity_and_id():
    error = NotFound("course", 42)

    assert str(error) == "Course 42 not found"
    assert error.to_dict() == {
        "error": {
            "code": "NOT_FOUND",
            "message": "Course 42 not found",
            "details": {"entity": "course", "id": 42},
        }
    }


def test_dangling_reference_names_missing_ids():
    error = DanglingReference({"student_id": 7, "course_id": 9})

    assert error.missing == {"student_id": 7, "course_id": 9}
    assert "student_id=7" in error.message
    assert "course_id=9" in error.message


def test_duplicate_enrollment_details():
    error = DuplicateEnrollment(3, 4)

    assert error.code == "DUPLICATE_ENROLLMENT"
    assert error.details == {"student_id": 3, "course_id": 4}
