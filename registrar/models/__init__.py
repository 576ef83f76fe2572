"""SQLAlchemy ORM Models for the Registrar Database Schema"""
from registrar.models.student import Student
from registrar.models.course import Course
from registrar.models.enrollment import Enrollment

__all__ = [
    "Student",
    "Course",
    "Enrollment",
]
