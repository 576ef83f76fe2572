"""Course model - Courses students can enroll in"""
from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.sql import func

from registrar.database import Base

DEFAULT_CREDITS = 3


class Course(Base):
    """Course with its credit value"""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    credits = Column(
        Integer,
        CheckConstraint("credits >= 0 AND credits <= 10", name="ck_courses_credits_range"),
        nullable=False,
        default=DEFAULT_CREDITS,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("length(title) BETWEEN 1 AND 100", name="ck_courses_title_length"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Course(id={self.id}, title={self.title}, credits={self.credits})>"
