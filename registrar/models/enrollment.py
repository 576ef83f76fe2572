"""Enrollment model - Links a student to a course with an optional grade"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, Index
from sqlalchemy.sql import func

from registrar.database import Base


class Enrollment(Base):
    """Student enrollment in a course"""

    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(
        Integer,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    grade = Column(
        Integer,
        CheckConstraint("grade >= 0 AND grade <= 100", name="ck_enrollments_grade_range"),
        nullable=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # One enrollment per (student, course) pair
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollments_student_course"),
        Index("idx_enrollments_course", "course_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Enrollment(id={self.id}, student={self.student_id}, course={self.course_id}, grade={self.grade})>"
