"""
Registrar error kinds

Every rule violation raised by the integrity layer is a RegistrarError, so
callers (the HTTP adapter included) can catch them uniformly and render
the same {"error": {"code", "message", "details"}} envelope.
"""
from typing import Any, Dict, List, Optional


class RegistrarError(Exception):
    """Base class for all registrar errors"""

    code = "REGISTRAR_ERROR"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(RegistrarError):
    """One or more field values violate their declared constraints"""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: List[Dict[str, str]], entity: Optional[str] = None):
        fields = ", ".join(error["field"] for error in errors)
        prefix = f"Invalid {entity}" if entity else "Invalid fields"
        super().__init__(f"{prefix}: {fields}", details=errors)
        self.errors = errors
        self.entity = entity

    @property
    def fields(self) -> List[str]:
        return [error["field"] for error in self.errors]


class NotFound(RegistrarError):
    """The targeted id does not exist"""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity.capitalize()} {entity_id} not found",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class DanglingReference(RegistrarError):
    """An enrollment points at a student or course that does not exist"""

    code = "DANGLING_REFERENCE"

    def __init__(self, missing: Dict[str, Any]):
        names = ", ".join(f"{field}={value}" for field, value in missing.items())
        super().__init__(f"Referenced records do not exist: {names}", details=missing)
        self.missing = missing


class DuplicateEnrollment(RegistrarError):
    """The student is already enrolled in the course"""

    code = "DUPLICATE_ENROLLMENT"

    def __init__(self, student_id: Any, course_id: Any):
        super().__init__(
            f"Student {student_id} is already enrolled in course {course_id}",
            details={"student_id": student_id, "course_id": course_id},
        )
        self.student_id = student_id
        self.course_id = course_id
