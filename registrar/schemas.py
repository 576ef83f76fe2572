"""
Pydantic models for registrar records

Field models (StudentFields, CourseFields, EnrollmentFields) carry every
field-level constraint and are what the entity store validates against.
Read models are the detached shapes returned to callers.
"""
from datetime import date, datetime
from typing import List, Optional
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from registrar.models.course import DEFAULT_CREDITS

NAME_MAX_LENGTH = 50
TITLE_MAX_LENGTH = 100
MIN_CREDITS, MAX_CREDITS = 0, 10
MIN_GRADE, MAX_GRADE = 0, 100


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


def _valid_email(value: Optional[str]) -> Optional[str]:
    """Check email syntax, keeping the address exactly as entered"""
    if value is None:
        return value
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from e
    return value


# Field models


class StudentFields(BaseModel):
    """Writable student fields"""
    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    email: Optional[str] = None
    date_of_birth: Optional[date] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def names_not_blank(cls, value):
        return _not_blank(value)

    @field_validator("email")
    @classmethod
    def email_syntax(cls, value):
        return _valid_email(value)


class CourseFields(BaseModel):
    """Writable course fields"""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    credits: StrictInt = Field(DEFAULT_CREDITS, ge=MIN_CREDITS, le=MAX_CREDITS)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return _not_blank(value)


class EnrollmentFields(BaseModel):
    """Writable enrollment fields"""
    model_config = ConfigDict(extra="forbid")

    student_id: StrictInt
    course_id: StrictInt
    grade: Optional[StrictInt] = Field(None, ge=MIN_GRADE, le=MAX_GRADE)


# Partial updates (HTTP request bodies)


class StudentPatch(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[date] = None


class CoursePatch(BaseModel):
    title: Optional[str] = None
    credits: Optional[StrictInt] = None


class EnrollmentCreate(BaseModel):
    student_id: StrictInt
    course_id: StrictInt
    grade: Optional[StrictInt] = None


class GradeUpdate(BaseModel):
    grade: Optional[StrictInt] = None


# Read models


class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CourseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    credits: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EnrollmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    grade: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudentWithEnrollments(StudentRead):
    """Student plus its enrollments ordered by id"""
    enrollments: List[EnrollmentRead] = []


class CourseWithEnrollments(CourseRead):
    """Course plus its enrollments ordered by id"""
    enrollments: List[EnrollmentRead] = []
