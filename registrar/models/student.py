"""Student model - People who can enroll in courses"""
from sqlalchemy import Column, Integer, String, Date, DateTime, CheckConstraint, Index
from sqlalchemy.sql import func

from registrar.database import Base


class Student(Base):
    """Student identity and contact details"""

    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(254), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("length(first_name) BETWEEN 1 AND 50", name="ck_students_first_name_length"),
        CheckConstraint("length(last_name) BETWEEN 1 AND 50", name="ck_students_last_name_length"),
        Index("idx_students_last_name", "last_name", "first_name"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Student(id={self.id}, name={self.first_name} {self.last_name})>"
