"""
Entity Store

Keyed storage for students, courses and enrollments. Assigns identities
and enforces field-level validation on every write. The store knows
nothing about cross-entity rules; every method runs on the caller's
session so the caller owns the transaction.
"""
import logging
from typing import Any, Dict, Iterable, List, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from registrar.database import Base
from registrar.exceptions import NotFound, ValidationError
from registrar.models import Course, Enrollment, Student
from registrar.schemas import CourseFields, EnrollmentFields, StudentFields

logger = logging.getLogger(__name__)


def field_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    """
    Flatten a pydantic ValidationError into one entry per violated field.

    Args:
        exc: Error raised by model validation

    Returns:
        list: [{"field": ..., "message": ...}] in the order pydantic reports them
    """
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        message = error["msg"]
        if error["type"] == "extra_forbidden":
            message = "Unknown field"
        errors.append({"field": field, "message": message})
    return errors


class EntityStore:
    """Storage and field validation for one entity kind"""

    def __init__(
        self,
        name: str,
        model: Type[Base],
        schema: Type[BaseModel],
        immutable_fields: Iterable[str] = (),
    ):
        self.name = name
        self.model = model
        self.schema = schema
        self.immutable_fields = frozenset(immutable_fields)

    def validate(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a complete record.

        Returns:
            dict: Normalized field values

        Raises:
            ValidationError: Listing every violated field
        """
        try:
            record = self.schema.model_validate(fields)
        except PydanticValidationError as e:
            raise ValidationError(field_errors(e), entity=self.name) from e
        return record.model_dump()

    async def create(self, session: AsyncSession, fields: Dict[str, Any]):
        """Validate and insert a new record, returning it with its assigned id"""
        values = self.validate(fields)
        row = self.model(**values)
        session.add(row)
        await session.flush()
        await session.refresh(row)
        logger.debug(f"Created {self.name} {row.id}")
        return row

    async def update(self, session: AsyncSession, entity_id: Any, patch: Dict[str, Any]):
        """
        Merge a patch over an existing record and validate the result as create does.

        Raises:
            NotFound: If no record has this id
            ValidationError: If the merged record is invalid or the patch
                touches an immutable field
        """
        row = await self.get(session, entity_id, for_update=True)
        if row is None:
            raise NotFound(self.name, entity_id)

        immutable = sorted(self.immutable_fields.intersection(patch))
        if immutable:
            raise ValidationError(
                [{"field": field, "message": "Field cannot be changed"} for field in immutable],
                entity=self.name,
            )

        current = {field: getattr(row, field) for field in self.schema.model_fields}
        values = self.validate({**current, **patch})

        for field, value in values.items():
            setattr(row, field, value)
        await session.flush()
        await session.refresh(row)
        logger.debug(f"Updated {self.name} {entity_id}: {sorted(patch)}")
        return row

    async def delete(self, session: AsyncSession, entity_id: Any) -> bool:
        """Remove a record if present; absent ids are a no-op"""
        result = await session.execute(delete(self.model).where(self.model.id == entity_id))
        return result.rowcount > 0

    async def delete_where(self, session: AsyncSession, **criteria) -> int:
        """Remove every record whose columns equal the given values"""
        result = await session.execute(delete(self.model).filter_by(**criteria))
        return result.rowcount

    async def get(self, session: AsyncSession, entity_id: Any, for_update: bool = False):
        """Fetch one record by id, or None. for_update takes a row lock where the backend supports it"""
        stmt = select(self.model).where(self.model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_one(self, session: AsyncSession, **criteria):
        stmt = select(self.model).filter_by(**criteria).order_by(self.model.id).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self, session: AsyncSession, **criteria) -> List[Any]:
        """All records matching the criteria, ordered by id"""
        stmt = select(self.model).filter_by(**criteria).order_by(self.model.id)
        result = await session.execute(stmt)
        return list(result.scalars().all())


student_store = EntityStore("student", Student, StudentFields)
course_store = EntityStore("course", Course, CourseFields)
enrollment_store = EntityStore(
    "enrollment",
    Enrollment,
    EnrollmentFields,
    immutable_fields=("student_id", "course_id"),
)
