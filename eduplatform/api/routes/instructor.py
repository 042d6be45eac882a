from fastapi import APIRouter, Depends, Body
from sqlalchemy.orm import Session
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import CurrentUser
from eduplatform.dependencies.roles import get_current_instructor
from eduplatform.schemas.course import CourseCreate, CourseCreateResponse, CourseUpdate, CourseResponse, CourseListResponse
from eduplatform.services.submission_service import submit_course, get_my_courses, update_course_details

router = APIRouter(
    dependencies=[Depends(get_current_instructor)]
)


@router.post("/courses", response_model=CourseCreateResponse, summary="강의 개설 요청")
def create_course(
    course_in: CourseCreate = Body(...),
    db: Session = Depends(get_db),
    instructor: CurrentUser = Depends(get_current_instructor)
):
    """
    강의를 pending 상태로 등록합니다. 관리자 승인 후에 공개됩니다.
    """
    course = submit_course(db, instructor.id, course_in)
    return CourseCreateResponse(
        id=course.id,
        approval_status=course.approval_status,
        message="Course created. Waiting for admin approval."
    )


@router.get("/courses", response_model=CourseListResponse, summary="내 강의 목록 조회")
def get_my_course_list(
    db: Session = Depends(get_db),
    instructor: CurrentUser = Depends(get_current_instructor)
):
    return CourseListResponse(courses=get_my_courses(db, instructor.id))


@router.patch("/courses/{course_id}", response_model=CourseResponse, summary="내 강의 정보 수정")
def update_my_course(
    course_id: str,
    course_in: CourseUpdate = Body(...),
    db: Session = Depends(get_db),
    instructor: CurrentUser = Depends(get_current_instructor)
):
    """
    본인 소유 강의의 제목/설명/가격 등 일반 정보만 수정합니다.
    승인 상태와 공개 여부는 수정할 수 없습니다.
    """
    return update_course_details(db, instructor.id, course_id, course_in)
