from fastapi import APIRouter, Depends, Body
from sqlalchemy.orm import Session
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import get_current_user_id
from eduplatform.schemas.application import (
    InstructorApplicationCreate,
    InstructorApplicationCreateResponse,
    InstructorApplicationResponse,
)
from eduplatform.services.submission_service import submit_instructor_application, get_my_applications

router = APIRouter()


@router.post("", response_model=InstructorApplicationCreateResponse, summary="강사 신청")
def apply_as_instructor(
    application_in: InstructorApplicationCreate = Body(...),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """
    강사 신청서를 제출합니다.
    - 자기소개(bio)는 50자 이상
    - 이미 대기 중인 신청서가 있으면 422
    """
    application = submit_instructor_application(db, user_id, application_in)
    return InstructorApplicationCreateResponse(
        id=application.id,
        status=application.status,
        message="Application submitted. Waiting for admin review."
    )


@router.get("/me", response_model=list[InstructorApplicationResponse], summary="내 강사 신청 내역 조회")
def get_my_application_list(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return get_my_applications(db, user_id)
