"""
Notification dispatcher.

상태 전이 이벤트를 수신자 목록으로 펼쳐(fan-out) 수신자마다
in-app 알림 1건을 저장하고 이메일 발송을 시도합니다.
수신자 단위의 실패는 집계만 하고 나머지 수신자 처리를 계속합니다.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eduplatform.core.config import settings
from eduplatform.core.enums import NotificationEvent, NotificationType, EmailOutcome
from eduplatform.core.exceptions import DeliveryError, NotFoundError
from eduplatform.models.notification import Notification
from eduplatform.models.user_profile import UserProfile
from eduplatform.services.email_templates import render_email
from eduplatform.services.follow_service import followers_of
from eduplatform.services.mail import MailSender
from eduplatform.services.store import commit

logger = logging.getLogger(__name__)


@dataclass
class RecipientOutcome:
    user_id: str
    in_app: bool = False
    email: EmailOutcome = EmailOutcome.SKIPPED
    error: str | None = None


@dataclass
class DispatchResult:
    event: NotificationEvent
    recipients: list[RecipientOutcome] = field(default_factory=list)
    demo: bool = False
    error: str | None = None

    @property
    def attempted(self) -> int:
        return len(self.recipients)

    @property
    def in_app_written(self) -> int:
        return sum(1 for r in self.recipients if r.in_app)

    @property
    def in_app_failed(self) -> int:
        return self.attempted - self.in_app_written

    def _count_email(self, outcome: EmailOutcome) -> int:
        return sum(1 for r in self.recipients if r.email is outcome)

    @property
    def emails_sent(self) -> int:
        return self._count_email(EmailOutcome.SENT)

    @property
    def emails_demo(self) -> int:
        return self._count_email(EmailOutcome.DEMO)

    @property
    def emails_failed(self) -> int:
        return self._count_email(EmailOutcome.FAILED)

    @property
    def emails_skipped(self) -> int:
        return self._count_email(EmailOutcome.SKIPPED)

    @property
    def fully_delivered(self) -> bool:
        if self.error:
            return False
        return all(r.in_app and r.email in (EmailOutcome.SENT, EmailOutcome.DEMO) for r in self.recipients)

    def to_dict(self) -> dict:
        return {
            "event": self.event.value,
            "attempted": self.attempted,
            "in_app_written": self.in_app_written,
            "in_app_failed": self.in_app_failed,
            "emails_sent": self.emails_sent,
            "emails_demo": self.emails_demo,
            "emails_failed": self.emails_failed,
            "emails_skipped": self.emails_skipped,
            "demo": self.demo,
            "fully_delivered": self.fully_delivered,
            "recipients": [
                {"user_id": r.user_id, "in_app": r.in_app, "email": r.email.value, "error": r.error}
                for r in self.recipients
            ],
            "error": self.error,
        }


def resolve_recipients(db: Session, event: NotificationEvent, payload: dict) -> list[str]:
    if event is NotificationEvent.COURSE_PUBLISHED:
        return followers_of(db, payload["instructor_id"])
    return [payload["user_id"]]


def build_in_app_content(event: NotificationEvent, payload: dict) -> dict:
    notes = payload.get("notes")
    reason = f" Reason: {notes}" if notes else ""

    if event is NotificationEvent.COURSE_APPROVED:
        return {
            "title": "Course approved",
            "message": f'Your course "{payload["course_title"]}" has been approved and published.',
            "type": NotificationType.COURSE.value,
            "link": f"/courses/{payload['course_id']}",
        }
    if event is NotificationEvent.COURSE_REJECTED:
        return {
            "title": "Course rejected",
            "message": f'Your course "{payload["course_title"]}" was rejected.{reason}',
            "type": NotificationType.COURSE.value,
            "link": f"/courses/{payload['course_id']}",
        }
    if event is NotificationEvent.COURSE_PUBLISHED:
        return {
            "title": "New course!",
            "message": f'{payload.get("instructor_name") or "An instructor"} just launched a new course: "{payload["course_title"]}"',
            "type": NotificationType.NEW_COURSE.value,
            "link": f"/courses/{payload['course_id']}",
        }
    if event is NotificationEvent.INSTRUCTOR_APPROVED:
        return {
            "title": "Instructor application approved",
            "message": "Your instructor application has been approved. You can now create courses.",
            "type": NotificationType.SYSTEM.value,
            "link": "/instructor-dashboard",
        }
    return {
        "title": "Instructor application rejected",
        "message": f"Your instructor application was rejected.{reason}",
        "type": NotificationType.SYSTEM.value,
        "link": "/become-instructor",
    }


def write_in_app_notification(db: Session, user_id: str, content: dict) -> None:
    db.add(Notification(user_id=user_id, is_read=False, **content))
    db.flush()


def _contacts(db: Session, user_ids: list[str]) -> dict[str, UserProfile]:
    if not user_ids:
        return {}
    profiles = db.query(UserProfile).filter(UserProfile.id.in_(user_ids)).all()
    return {p.id: p for p in profiles}


def _write_in_app(db: Session, event: NotificationEvent, payload: dict, outcomes: list[RecipientOutcome]) -> None:
    try:
        content = build_in_app_content(event, payload)
    except Exception:
        logger.exception(f"Could not build in-app notification for {event.value}")
        for outcome in outcomes:
            outcome.error = "in-app notification could not be rendered"
        return

    for outcome in outcomes:
        try:
            with db.begin_nested():
                write_in_app_notification(db, outcome.user_id, content)
            outcome.in_app = True
        except SQLAlchemyError as e:
            logger.warning(f"In-app notification failed - user: {outcome.user_id}, event: {event.value}: {e}")
            outcome.error = "in-app notification could not be saved"

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Committing notifications for {event.value} failed: {e}")
        for outcome in outcomes:
            if outcome.in_app:
                outcome.in_app = False
                outcome.error = "in-app notification could not be saved"


def _send_emails(
    mailer: MailSender,
    event: NotificationEvent,
    payload: dict,
    outcomes: list[RecipientOutcome],
    contacts: dict[str, UserProfile],
    max_workers: int,
) -> None:
    jobs = {}
    for outcome in outcomes:
        profile = contacts.get(outcome.user_id)
        if profile is None or not profile.email:
            outcome.email = EmailOutcome.SKIPPED
            continue
        try:
            subject, html = render_email(event, payload, recipient_name=profile.full_name)
        except Exception as e:
            logger.exception(f"Could not render {event.value} email for user {outcome.user_id}")
            outcome.email = EmailOutcome.FAILED
            outcome.error = f"email could not be rendered: {e}"
            continue
        jobs[outcome.user_id] = (profile.email, subject, html)

    if not jobs:
        return

    pool = ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(jobs))))
    futures = {
        pool.submit(mailer.send, to, subject, html): user_id
        for user_id, (to, subject, html) in jobs.items()
    }
    by_user = {outcome.user_id: outcome for outcome in outcomes}
    # 전체 대기 시간 상한: 수신자별 timeout 이 순차로 밀리는 경우까지 포함
    done, not_done = wait(futures, timeout=mailer.timeout * max(1, len(jobs)) + 1)
    pool.shutdown(wait=False, cancel_futures=True)

    for future in done:
        outcome = by_user[futures[future]]
        try:
            future.result()
            outcome.email = EmailOutcome.SENT
        except DeliveryError as e:
            logger.warning(f"Email delivery failed - user: {outcome.user_id}, event: {event.value}: {e.message}")
            outcome.email = EmailOutcome.FAILED
            outcome.error = e.message
        except Exception as e:
            logger.exception(f"Unexpected error while emailing user {outcome.user_id}")
            outcome.email = EmailOutcome.FAILED
            outcome.error = str(e)

    for future in not_done:
        outcome = by_user[futures[future]]
        outcome.email = EmailOutcome.FAILED
        outcome.error = "email delivery timed out"


def dispatch(
    db: Session,
    mailer: MailSender,
    event: NotificationEvent,
    payload: dict,
    max_workers: int | None = None,
) -> DispatchResult:
    """
    이벤트 하나를 수신자 전원에게 전달합니다. 수신자 단위 실패로 예외를 내지 않습니다.

    Args:
        event: NotificationEvent
        payload: 이벤트 데이터. course_* 이벤트는 course_id, course_title,
            instructor 관련 이벤트는 full_name 을 포함하고,
            단일 수신자 이벤트는 user_id, course_published 는 instructor_id, instructor_name 이 필요합니다.

    Returns:
        DispatchResult (수신자별 in-app / email 결과와 집계)
    """
    demo = not mailer.configured
    result = DispatchResult(event=event, demo=demo)

    try:
        recipients = resolve_recipients(db, event, payload)
        contacts = _contacts(db, recipients)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not resolve recipients for {event.value}: {e}")
        result.error = "recipients could not be resolved"
        return result

    result.recipients = [RecipientOutcome(user_id=user_id) for user_id in recipients]
    if not recipients:
        logger.info(f"No recipients for {event.value}")
        return result

    _write_in_app(db, event, payload, result.recipients)

    if demo:
        for outcome in result.recipients:
            profile = contacts.get(outcome.user_id)
            try:
                subject, _ = render_email(event, payload, recipient_name=profile.full_name if profile else None)
            except Exception as e:
                logger.exception(f"Could not render {event.value} email for user {outcome.user_id}")
                outcome.email = EmailOutcome.FAILED
                outcome.error = f"email could not be rendered: {e}"
                continue
            mailer.log_demo(profile.email if profile and profile.email else f"user:{outcome.user_id}", subject, event.value)
            outcome.email = EmailOutcome.DEMO
    else:
        _send_emails(
            mailer, event, payload, result.recipients, contacts,
            max_workers or settings.NOTIFICATION_MAX_WORKERS,
        )

    logger.info(
        f"Dispatched {event.value} - recipients: {result.attempted}, in-app: {result.in_app_written}, "
        f"sent: {result.emails_sent}, demo: {result.emails_demo}, failed: {result.emails_failed}, "
        f"skipped: {result.emails_skipped}"
    )
    return result


# --- 수신자 본인의 알림함 ---

def list_notifications(db: Session, user_id: str, unread_only: bool = False, limit: int = 50) -> list[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc()).limit(limit).all()


def unread_count(db: Session, user_id: str) -> int:
    return db.query(Notification).filter(Notification.user_id == user_id, Notification.is_read.is_(False)).count()


def _get_own_notification(db: Session, user_id: str, notification_id: str) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if not notification:
        raise NotFoundError("Notification not found.")
    return notification


def mark_as_read(db: Session, user_id: str, notification_id: str) -> Notification:
    notification = _get_own_notification(db, user_id, notification_id)
    notification.is_read = True
    commit(db)
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user_id: str) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({"is_read": True}, synchronize_session=False)
    )
    commit(db)
    return updated


def delete_notification(db: Session, user_id: str, notification_id: str) -> None:
    notification = _get_own_notification(db, user_id, notification_id)
    db.delete(notification)
    commit(db)
