"""
HTTP 함수형 엔드포인트 (알림 메일 발송).

성공 시 200 + 결과 JSON (메일 미설정이면 demo: true),
실패 시 500 + {"error": ...}. OPTIONS 요청에는 빈 200 을 반환합니다.
"""

import logging

from fastapi import APIRouter, Depends, Body, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session


from eduplatform.core.exceptions import DeliveryError
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import CurrentUser, get_current_user
from eduplatform.dependencies.mail import get_mail_sender
from eduplatform.dependencies.roles import get_current_admin
from eduplatform.schemas.functions import (
    InstructorDecisionMailRequest,
    CourseDecisionMailRequest,
    NotifyFollowersRequest,
    ReportEmailRequest,
)
from eduplatform.services.email_templates import instructor_decision_email, course_decision_email, report_email
from eduplatform.services.mail import MailSender
from eduplatform.services.review_service import announce_published_course

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _json(content: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def _preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


def _send_single(mailer: MailSender, to: str, subject: str, html: str, description: str) -> JSONResponse:
    if not mailer.configured:
        mailer.log_demo(to, subject, description)
        return _json({"success": True, "demo": True, "message": f"Demo: Email notification logged for {to}"})
    try:
        data = mailer.send(to, subject, html)
    except DeliveryError as e:
        logger.error(f"Error sending notification: {e.message}")
        return _json({"error": e.message}, status_code=500)
    return _json({"success": True, "demo": False, "data": data})


@router.options("/send-instructor-notification")
@router.options("/send-course-approval-notification")
@router.options("/send-course-notification")
@router.options("/send-report-email")
def preflight():
    return _preflight()


@router.post("/send-instructor-notification", summary="강사 신청 심사 결과 메일 발송")
def send_instructor_notification(
    req: InstructorDecisionMailRequest = Body(...),
    admin: CurrentUser = Depends(get_current_admin),
    mailer: MailSender = Depends(get_mail_sender)
):
    logger.info(f"Processing notification for {req.full_name} ({req.email}) - Status: {req.status}")
    subject, html = instructor_decision_email(req.full_name, req.status == "approved", req.notes)
    return _send_single(mailer, req.email, subject, html, f"instructor_{req.status}")


@router.post("/send-course-approval-notification", summary="강의 심사 결과 메일 발송")
def send_course_approval_notification(
    req: CourseDecisionMailRequest = Body(...),
    admin: CurrentUser = Depends(get_current_admin),
    mailer: MailSender = Depends(get_mail_sender)
):
    logger.info(f"Processing course approval notification for {req.instructor_name} ({req.email}) - Course: {req.course_title} - Status: {req.status}")
    subject, html = course_decision_email(req.instructor_name, req.course_title, req.status == "approved", req.notes)
    return _send_single(mailer, req.email, subject, html, f"course_{req.status}")


@router.post("/send-course-notification", summary="팔로워에게 새 강의 알림")
def send_course_notification(
    req: NotifyFollowersRequest = Body(...),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    mailer: MailSender = Depends(get_mail_sender)
):
    """
    공개(승인)된 강의만 알릴 수 있습니다. 강사 본인 또는 관리자만 호출할 수 있습니다.
    - 없는 강의 404, 비공개 강의 409
    """
    logger.info(f"Sending notifications for course {req.course_id} requested by {user.id}")
    result = announce_published_course(db, mailer, req.course_id, user.id)

    if result.error:
        return _json({"error": result.error}, status_code=500)
    if result.attempted == 0:
        return _json({"message": "No followers to notify", "total_followers": 0, "notifications_sent": 0, "demo": result.demo})

    return _json({
        "message": f"Notified {result.in_app_written} followers",
        "total_followers": result.attempted,
        "notifications_sent": result.in_app_written,
        "emails_sent": result.emails_sent,
        "emails_failed": result.emails_failed,
        "demo": result.demo,
        "result": result.to_dict(),
    })


@router.post("/send-report-email", summary="관리자 통계 리포트 메일 발송")
def send_report_email(
    req: ReportEmailRequest = Body(...),
    admin: CurrentUser = Depends(get_current_admin),
    mailer: MailSender = Depends(get_mail_sender)
):
    report_data = req.report_data.model_dump() if req.report_data else None
    if not mailer.configured:
        mailer.log_demo(req.email, f"{req.report_type} report", "report_email")
        return _json({
            "success": True,
            "demo": True,
            "message": f"Demo mode: Email would be sent to {req.email} if RESEND_API_KEY was configured",
            "preview": {
                "to": req.email,
                "reportType": req.report_type,
                "reportData": req.report_data.model_dump(by_alias=True) if req.report_data else None,
            },
        })

    subject, html = report_email(req.report_type, report_data)
    return _send_single(mailer, req.email, subject, html, "report_email")
