"""
Course API Endpoints

GET    /api/v1/courses       - List courses
POST   /api/v1/courses       - Create a course
GET    /api/v1/courses/:id   - Course with its enrollments
PATCH  /api/v1/courses/:id   - Update course fields
DELETE /api/v1/courses/:id   - Delete a course and its enrollments
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel

from registrar.api.dependencies import get_integrity_enforcer, get_query_facade
from registrar.schemas import CourseFields, CoursePatch, CourseRead, CourseWithEnrollments
from registrar.services.integrity_enforcer import IntegrityEnforcer
from registrar.services.query_facade import QueryFacade

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


class CourseListResponse(BaseModel):
    data: List[CourseRead]


class CourseResponse(BaseModel):
    data: CourseRead


class CourseDetailResponse(BaseModel):
    data: CourseWithEnrollments


@router.get("", response_model=CourseListResponse)
async def list_courses(queries: QueryFacade = Depends(get_query_facade)):
    """List all courses ordered by id"""
    return CourseListResponse(data=await queries.list_courses())


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseFields,
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    """Create a course (credits default to 3)"""
    course = await enforcer.create_course(payload.model_dump())
    return CourseResponse(data=course)


@router.get("/{course_id}", response_model=CourseDetailResponse)
async def get_course(
    course_id: int = Path(..., description="Course id"),
    queries: QueryFacade = Depends(get_query_facade),
):
    """Get a course together with its enrollments"""
    return CourseDetailResponse(data=await queries.get_course_with_enrollments(course_id))


@router.patch("/{course_id}", response_model=CourseResponse)
async def update_course(
    payload: CoursePatch,
    course_id: int = Path(..., description="Course id"),
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
):
    course = await enforcer.update_course(course_id, payload.model_dump(exclude_unset=True))
    return CourseResponse(data=course)


@router.delete("/{course_id}")
async def delete_course(
    course_id: int = Path(..., description="Course id"),
    enforcer: IntegrityEnforcer = Depends(get_integrity_enforcer),
) -> Dict[str, Any]:
    """Delete a course; its enrollments are removed in the same transaction"""
    removed = await enforcer.delete_course(course_id)
    return {"data": {"id": course_id, "enrollments_removed": removed}}
