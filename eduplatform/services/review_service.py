"""
관리자 심사(Review Engine).

pending -> approved | rejected 는 한 번만 일어나는 전이입니다.
상태 변경은 'status == pending' 조건부 UPDATE 로 처리하므로
두 관리자가 동시에 심사해도 먼저 처리된 결정만 반영됩니다.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from eduplatform.core.config import settings
from eduplatform.core.enums import Role, ApprovalStatus, ReviewDecision, NotificationEvent
from eduplatform.core.exceptions import ValidationError, NotFoundError, InvalidStateError, AuthorizationError
from eduplatform.models.course import Course
from eduplatform.models.instructor_application import InstructorApplication
from eduplatform.services.mail import MailSender
from eduplatform.services.notification_service import dispatch, DispatchResult
from eduplatform.services.role_service import require_role, grant_role, authorize
from eduplatform.services.store import update_if, commit

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    record: object
    decision: ReviewDecision
    notifications: list[DispatchResult] = field(default_factory=list)

    @property
    def notifications_delivered(self) -> bool:
        return all(result.fully_delivered for result in self.notifications)


def _clean_notes(decision: ReviewDecision, notes: str | None) -> str | None:
    notes = (notes or "").strip() or None
    if decision is ReviewDecision.REJECT and settings.REQUIRE_REJECTION_NOTES and not notes:
        raise ValidationError("A reason is required when rejecting.", {"notes": "Rejection reason is required."})
    return notes


def _course_payload(course: Course, notes: str | None = None) -> dict:
    return {
        "user_id": course.instructor_id,
        "course_id": course.id,
        "course_title": course.title,
        "instructor_id": course.instructor_id,
        "instructor_name": course.instructor_name,
        "notes": notes,
    }


def _notify(db: Session, mailer: MailSender, event: NotificationEvent, payload: dict) -> DispatchResult:
    # 결정은 이미 commit 됨. 알림 단계의 오류는 결과에만 기록
    try:
        return dispatch(db, mailer, event, payload)
    except Exception:
        logger.exception(f"Notification dispatch for {event.value} failed after commit")
        db.rollback()
        return DispatchResult(event=event, demo=not mailer.configured, error="notification dispatch failed")


def _already_reviewed(kind: str, record_id: str, status: str) -> InvalidStateError:
    return InvalidStateError(f"{kind} {record_id} has already been reviewed ({status}).", current_status=status)


def review_course(
    db: Session,
    mailer: MailSender,
    course_id: str,
    decision: ReviewDecision,
    reviewer_id: str,
    notes: str | None = None,
) -> ReviewOutcome:
    require_role(db, reviewer_id, Role.ADMIN)
    notes = _clean_notes(decision, notes)

    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course not found.")
    if course.approval_status != ApprovalStatus.PENDING.value:
        raise _already_reviewed("Course", course_id, course.approval_status)

    approved = decision is ReviewDecision.APPROVE
    patch = {
        Course.approval_status: decision.target_status.value,
        # 승인될 때만 공개
        Course.is_published: approved,
        Course.approved_by: reviewer_id,
        Course.approved_at: datetime.utcnow(),
        Course.approval_notes: notes,
    }
    if not update_if(db, Course, course_id, patch, Course.approval_status == ApprovalStatus.PENDING.value):
        db.rollback()
        current = db.query(Course.approval_status).filter(Course.id == course_id).scalar()
        raise _already_reviewed("Course", course_id, current)
    commit(db)
    db.refresh(course)
    logger.info(f"Course reviewed - id: {course_id}, decision: {decision.value}, reviewer: {reviewer_id}")

    payload = _course_payload(course, notes)
    outcome = ReviewOutcome(record=course, decision=decision)
    if approved:
        outcome.notifications.append(_notify(db, mailer, NotificationEvent.COURSE_APPROVED, payload))
        outcome.notifications.append(_notify(db, mailer, NotificationEvent.COURSE_PUBLISHED, payload))
    else:
        outcome.notifications.append(_notify(db, mailer, NotificationEvent.COURSE_REJECTED, payload))
    return outcome


def announce_published_course(db: Session, mailer: MailSender, course_id: str, caller_id: str) -> DispatchResult:
    """
    공개된 강의를 팔로워에게 다시 알립니다. 알림 내용은 저장된 강의 정보로 만듭니다.
    강의 소유 강사 또는 관리자만 호출할 수 있습니다.
    """
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course not found.")
    if course.instructor_id != caller_id and not authorize(db, caller_id, Role.ADMIN):
        raise AuthorizationError("Only the instructor or an admin can notify followers.")
    if not course.is_published:
        raise InvalidStateError(
            f"Course {course_id} is not published ({course.approval_status}).",
            current_status=course.approval_status,
        )
    return _notify(db, mailer, NotificationEvent.COURSE_PUBLISHED, _course_payload(course))


def review_instructor_application(
    db: Session,
    mailer: MailSender,
    application_id: str,
    decision: ReviewDecision,
    reviewer_id: str,
    notes: str | None = None,
) -> ReviewOutcome:
    require_role(db, reviewer_id, Role.ADMIN)
    notes = _clean_notes(decision, notes)

    application = db.query(InstructorApplication).filter(InstructorApplication.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found.")
    if application.status != ApprovalStatus.PENDING.value:
        raise _already_reviewed("Application", application_id, application.status)

    patch = {
        InstructorApplication.status: decision.target_status.value,
        InstructorApplication.reviewed_by: reviewer_id,
        InstructorApplication.reviewed_at: datetime.utcnow(),
        InstructorApplication.notes: notes,
    }
    pending = InstructorApplication.status == ApprovalStatus.PENDING.value
    if not update_if(db, InstructorApplication, application_id, patch, pending):
        db.rollback()
        current = db.query(InstructorApplication.status).filter(InstructorApplication.id == application_id).scalar()
        raise _already_reviewed("Application", application_id, current)

    if decision is ReviewDecision.APPROVE:
        # 상태 변경과 같은 트랜잭션. 역할 부여가 실패하면 신청서도 pending 으로 남음
        grant_role(db, application.user_id, Role.INSTRUCTOR)
    commit(db)
    db.refresh(application)
    logger.info(f"Instructor application reviewed - id: {application_id}, decision: {decision.value}, reviewer: {reviewer_id}")

    event = (
        NotificationEvent.INSTRUCTOR_APPROVED
        if decision is ReviewDecision.APPROVE
        else NotificationEvent.INSTRUCTOR_REJECTED
    )
    payload = {
        "user_id": application.user_id,
        "full_name": application.full_name,
        "notes": notes,
    }
    outcome = ReviewOutcome(record=application, decision=decision)
    outcome.notifications.append(_notify(db, mailer, event, payload))
    return outcome


def list_courses_for_review(db: Session, status: ApprovalStatus | None = None) -> list[Course]:
    query = db.query(Course)
    if status:
        query = query.filter(Course.approval_status == status.value)
    return query.order_by(Course.created_at.desc()).all()


def list_applications_for_review(db: Session, status: ApprovalStatus | None = None) -> list[InstructorApplication]:
    query = db.query(InstructorApplication)
    if status:
        query = query.filter(InstructorApplication.status == status.value)
    return query.order_by(InstructorApplication.created_at.desc()).all()


def count_pending_courses(db: Session) -> int:
    return db.query(Course).filter(Course.approval_status == ApprovalStatus.PENDING.value).count()


def count_pending_applications(db: Session) -> int:
    return (
        db.query(InstructorApplication)
        .filter(InstructorApplication.status == ApprovalStatus.PENDING.value)
        .count()
    )
