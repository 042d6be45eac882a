"""이벤트별 이메일 제목/본문 HTML."""

from datetime import date
from html import escape

from eduplatform.core.config import settings
from eduplatform.core.enums import NotificationEvent

_WRAPPER = '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">{body}</div>'
_APPROVED_COLOR = "#10b981"
_REJECTED_COLOR = "#ef4444"


def _notes_block(label: str, notes: str | None) -> str:
    if not notes:
        return ""
    return f"<p><strong>{label}:</strong> {escape(notes)}</p>"


def absolute_url(path: str) -> str:
    return settings.SITE_URL.rstrip("/") + path


def instructor_decision_email(full_name: str, approved: bool, notes: str | None = None) -> tuple[str, str]:
    name = escape(full_name)
    if approved:
        subject = "Congratulations! Your instructor application has been approved"
        body = (
            f'<h1 style="color: {_APPROVED_COLOR};">Congratulations {name}!</h1>'
            f'<p>Your application to become an instructor has been <strong style="color: {_APPROVED_COLOR};">APPROVED</strong>.</p>'
            "<p>You can now:</p>"
            "<ul><li>Create and manage courses</li><li>Use the instructor dashboard</li><li>Connect with students</li></ul>"
            f"{_notes_block('Notes', notes)}"
            '<p style="margin-top: 20px;">Welcome to the instructor team!</p>'
        )
    else:
        subject = "Update on your instructor application"
        body = (
            f'<h1 style="color: {_REJECTED_COLOR};">Hello {name},</h1>'
            f'<p>Unfortunately, your application to become an instructor has been <strong style="color: {_REJECTED_COLOR};">REJECTED</strong>.</p>'
            f"{_notes_block('Reason', notes)}"
            '<p style="margin-top: 20px;">Best regards,<br>The admin team</p>'
        )
    return subject, _WRAPPER.format(body=body)


def course_decision_email(instructor_name: str, course_title: str, approved: bool, notes: str | None = None) -> tuple[str, str]:
    name = escape(instructor_name)
    title = escape(course_title)
    if approved:
        subject = f'Your course "{course_title}" has been approved and published'
        body = (
            f'<h1 style="color: {_APPROVED_COLOR};">Congratulations {name}!</h1>'
            f'<p>Your course <strong>"{title}"</strong> has been <strong style="color: {_APPROVED_COLOR};">APPROVED</strong> and published.</p>'
            "<p>It is now publicly listed and students can enroll right away.</p>"
            f"{_notes_block('Notes from the admin', notes)}"
            '<p style="margin-top: 20px;">Best regards,<br>The admin team</p>'
        )
    else:
        subject = f'Update on your course "{course_title}"'
        body = (
            f'<h1 style="color: {_REJECTED_COLOR};">Hello {name},</h1>'
            f'<p>Unfortunately, your course <strong>"{title}"</strong> has been <strong style="color: {_REJECTED_COLOR};">REJECTED</strong>.</p>'
            f"{_notes_block('Reason', notes)}"
            "<p>Please revise the course based on the feedback.</p>"
            '<p style="margin-top: 20px;">Best regards,<br>The admin team</p>'
        )
    return subject, _WRAPPER.format(body=body)


def new_course_email(instructor_name: str, course_title: str, course_id: str) -> tuple[str, str]:
    subject = f"New course from {instructor_name}!"
    body = (
        "<h1>New course!</h1>"
        "<p>Hello,</p>"
        f"<p><strong>{escape(instructor_name)}</strong> just launched a new course:</p>"
        f"<h2>{escape(course_title)}</h2>"
        f'<p><a href="{escape(absolute_url(f"/courses/{course_id}"))}">View the course</a></p>'
    )
    return subject, _WRAPPER.format(body=body)


REPORT_PERIODS = {"daily": "Daily", "weekly": "Weekly", "monthly": "Monthly"}


def _format_vnd(value: float) -> str:
    return f"{round(value):,}".replace(",", ".") + " ₫"


def _change_line(change: float) -> str:
    color = _APPROVED_COLOR if change >= 0 else _REJECTED_COLOR
    arrow = "↑" if change >= 0 else "↓"
    return f'<div style="color: {color}; font-size: 14px;">{arrow} {abs(change):.1f}% vs previous period</div>'


def report_email(report_type: str, data: dict | None = None, today: date | None = None) -> tuple[str, str]:
    """
    관리자 통계 리포트 메일. data 가 없으면 모든 수치를 0 으로 표시합니다.
    data 키: total_revenue, total_students, total_courses, revenue_change, students_change
    """
    data = {
        "total_revenue": 0,
        "total_students": 0,
        "total_courses": 0,
        "revenue_change": 0,
        "students_change": 0,
        **(data or {}),
    }
    today = today or date.today()
    period = REPORT_PERIODS[report_type]

    subject = f"{period} statistics report - {today.isoformat()}"
    body = (
        f"<h1>{period} report</h1>"
        f'<p style="color: #666;">{today.strftime("%A, %d %B %Y")}</p>'
        "<h2>Performance overview</h2>"
        f'<p><strong>{_format_vnd(data["total_revenue"])}</strong><br>Total revenue</p>'
        f'{_change_line(data["revenue_change"])}'
        f'<p><strong>{data["total_students"]:,}</strong><br>Total students</p>'
        f'{_change_line(data["students_change"])}'
        f'<p><strong>{data["total_courses"]}</strong><br>Total courses</p>'
        '<p style="color: #666; font-size: 12px;">This email was sent automatically by the admin system.</p>'
    )
    return subject, _WRAPPER.format(body=body)


def render_email(event: NotificationEvent, payload: dict, recipient_name: str | None = None) -> tuple[str, str]:
    if event in (NotificationEvent.COURSE_APPROVED, NotificationEvent.COURSE_REJECTED):
        return course_decision_email(
            payload.get("instructor_name") or recipient_name or "Instructor",
            payload["course_title"],
            approved=event is NotificationEvent.COURSE_APPROVED,
            notes=payload.get("notes"),
        )
    if event in (NotificationEvent.INSTRUCTOR_APPROVED, NotificationEvent.INSTRUCTOR_REJECTED):
        return instructor_decision_email(
            payload.get("full_name") or recipient_name or "there",
            approved=event is NotificationEvent.INSTRUCTOR_APPROVED,
            notes=payload.get("notes"),
        )
    return new_course_email(payload.get("instructor_name") or "Instructor", payload["course_title"], payload["course_id"])
