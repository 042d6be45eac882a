from typing import Optional

from fastapi import APIRouter, Depends, Body
from sqlalchemy.orm import Session
from eduplatform.core.enums import ApprovalStatus
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import CurrentUser
from eduplatform.dependencies.mail import get_mail_sender
from eduplatform.dependencies.roles import get_current_admin
from eduplatform.schemas.review import (
    ReviewRequest,
    CourseReviewResponse,
    ApplicationReviewResponse,
    CourseReviewListResponse,
    ApplicationReviewListResponse,
)
from eduplatform.services.mail import MailSender
from eduplatform.services.review_service import (
    review_course,
    review_instructor_application,
    list_courses_for_review,
    list_applications_for_review,
    count_pending_courses,
    count_pending_applications,
)

router = APIRouter(
    dependencies=[Depends(get_current_admin)]
)


def _decision_message(outcome) -> str:
    if outcome.notifications_delivered:
        return "Decision recorded. Notifications delivered."
    return "Decision recorded. Some notifications could not be delivered."


@router.get("/courses", response_model=CourseReviewListResponse, summary="강의 심사 목록 조회(관리자)")
def get_courses_for_review(
    status: Optional[ApprovalStatus] = None,
    db: Session = Depends(get_db)
):
    """
    전체 강의(또는 status 로 필터링된 강의)를 최신순으로 반환합니다.
    """
    courses = list_courses_for_review(db, status)
    return {"courses": courses, "pending_count": count_pending_courses(db)}


@router.post("/courses/{course_id}/review", response_model=CourseReviewResponse, summary="강의 승인/거절(관리자)")
def review_course_api(
    course_id: str,
    req: ReviewRequest = Body(...),
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    mailer: MailSender = Depends(get_mail_sender)
):
    """
    pending 상태의 강의를 승인(공개) 또는 거절합니다.
    - 이미 심사된 강의는 409
    - 거절 시 사유(notes) 필수
    - decision_recorded 와 notifications_delivered 를 구분해서 반환
    """
    outcome = review_course(db, mailer, course_id, req.decision, admin.id, req.notes)
    return {
        "course": outcome.record,
        "decision_recorded": True,
        "notifications_delivered": outcome.notifications_delivered,
        "notifications": [result.to_dict() for result in outcome.notifications],
        "message": _decision_message(outcome),
    }


@router.get("/applications", response_model=ApplicationReviewListResponse, summary="강사 신청서 목록 조회(관리자)")
def get_applications_for_review(
    status: Optional[ApprovalStatus] = None,
    db: Session = Depends(get_db)
):
    applications = list_applications_for_review(db, status)
    return {"applications": applications, "pending_count": count_pending_applications(db)}


@router.post("/applications/{application_id}/review", response_model=ApplicationReviewResponse, summary="강사 신청 승인/거절(관리자)")
def review_application_api(
    application_id: str,
    req: ReviewRequest = Body(...),
    admin: CurrentUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    mailer: MailSender = Depends(get_mail_sender)
):
    """
    강사 신청서를 승인 또는 거절합니다. 승인 시 instructor 역할이 부여됩니다.
    """
    outcome = review_instructor_application(db, mailer, application_id, req.decision, admin.id, req.notes)
    return {
        "application": outcome.record,
        "decision_recorded": True,
        "notifications_delivered": outcome.notifications_delivered,
        "notifications": [result.to_dict() for result in outcome.notifications],
        "message": _decision_message(outcome),
    }
