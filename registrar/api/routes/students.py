"""
Student API Endpoints

GET    /api/v1/students       - List students
POST   /api/v1/students       - Create a student
GET    /api/v1/students/:id   - Student with its enrollments
PATCH  /api/v1/students/:id   - Update student fields
DELETE /api/v1/students/:id   - Delete a student and its enrollments
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel

from registrar.api.dependencies import get_integrity_enforcer, get_query_facade
from registrar.schemas import StudentFields, StudentPatch, StudentRead, StudentWithEnrollments
from registrar.services.integrity_enforcer import IntegrityEnforcer
from registrar.services.query_facade import QueryFacade

router = APIRouter(prefix="/api/v1/students", tags=["students"])


class StudentListResponse(BaseModel):
    data: List[StudentRead]


class StudentResponse(BaseModel):
    data: StudentRead


class StudentDetailResponse(BaseModel):
    data: StudentWithEnrollments


@router.get("", response_model=StudentListResponse)
async def list_students(queries: QueryFacade = Depends(get_query_facade)):
    """List all students ordered by id"""
    return StudentListResponse(data=await queries.list_students())


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    payload: StudentFields,
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    """Create a student"""
    student = await enforcer.create_student(payload.model_dump())
    return StudentResponse(data=student)


@router.get("/{student_id}", response_model=StudentDetailResponse)
async def get_student(
    student_id: int = Path(..., description="Student id"),
    queries: QueryFacade = Depends(get_query_facade),
):
    """Get a student together with its enrollments"""
    return StudentDetailResponse(data=await queries.get_student_with_enrollments(student_id))


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    payload: StudentPatch,
    student_id: int = Path(..., description="Student id"),
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    """Update the fields present in the request body"""
    student = await enforcer.update_student(student_id, payload.model_dump(exclude_unset=True))
    return StudentResponse(data=student)


@router.delete("/{student_id}")
async def delete_student(
    student_id: int = Path(..., description="Student id"),
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
) -> Dict[str, Any]:
    """Delete a student; its enrollments are removed in the same transaction"""
    removed = await enforcer.delete_student(student_id)
    return {"data": {"id": student_id, "enrollments_removed": removed}}
