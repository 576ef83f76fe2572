"""
Enrollment API Endpoints

GET    /api/v1/enrollments             - List enrollments
POST   /api/v1/enrollments             - Enroll a student in a course
GET    /api/v1/enrollments/:id         - Get one enrollment
PUT    /api/v1/enrollments/:id/grade   - Set or clear the grade
DELETE /api/v1/enrollments/:id         - Remove an enrollment
"""
from typing import List

from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel

from registrar.api.dependencies import get_integrity_enforcer, get_query_facade
from registrar.schemas import EnrollmentCreate, EnrollmentRead, GradeUpdate
from registrar.services.integrity_enforcer import IntegrityEnforcer
from registrar.services.query_facade import QueryFacade

router = APIRouter(prefix="/api/v1/enrollments", tags=["enrollments"])


class EnrollmentListResponse(BaseModel):
    data: List[EnrollmentRead]


class EnrollmentResponse(BaseModel):
    data: EnrollmentRead


@router.get("", response_model=EnrollmentListResponse)
async def list_enrollments(queries: QueryFacade = Depends(get_query_facade)):
    return EnrollmentListResponse(data=await queries.list_enrollments())


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    payload: EnrollmentCreate,
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    """
    Enroll a student in a course.

    Raises:
        409: If the student or course does not exist, or the pair is already enrolled
        422: If grade is outside 0-100
    """
    enrollment = await enforcer.create_enrollment(
        payload.student_id, payload.course_id, payload.grade
    )
    return EnrollmentResponse(data=enrollment)


@router.get("/{enrollment_id}", response_model=EnrollmentResponse)
async def get_enrollment(
    enrollment_id: int = Path(..., description="Enrollment id"),
    queries: QueryFacade = Depends(get_query_facade),
):
    return EnrollmentResponse(data=await queries.get_enrollment(enrollment_id))


@router.put("/{enrollment_id}/grade", response_model=EnrollmentResponse)
async def update_grade(
    payload: GradeUpdate,
    enrollment_id: int = Path(..., description="Enrollment id"),
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    """Set the grade, or clear it with null"""
    enrollment = await enforcer.update_enrollment_grade(enrollment_id, payload.grade)
    return EnrollmentResponse(data=enrollment)


@router.delete("/{enrollment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_enrollment(
    enrollment_id: int = Path(..., description="Enrollment id"),
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    await enforcer.delete_enrollment(enrollment_id)
