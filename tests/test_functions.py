from eduplatform.core.enums import Role
from eduplatform.dependencies.mail import get_mail_sender
from eduplatform.main import app
from eduplatform.models.course import Course
from eduplatform.models.instructor_follow import InstructorFollow
from eduplatform.models.notification import Notification

from helpers import ADMIN_ID, INSTRUCTOR_ID, STUDENT_ID, FakeMailer, auth_headers, make_user

INSTRUCTOR_MAIL = {
    "email": "minh@example.com",
    "fullName": "Minh Tran",
    "status": "approved",
}

COURSE_MAIL = {
    "email": "lan@example.com",
    "instructorName": "Lan Nguyen",
    "courseTitle": "Advanced TypeScript",
    "status": "rejected",
    "notes": "Please add more exercises.",
}

NEW_COURSE = {
    "instructor_id": INSTRUCTOR_ID,
    "instructor_name": "Lan Nguyen",
    "course_title": "Advanced TypeScript",
    "course_id": "course-1",
}

REPORT = {
    "email": "admin@example.com",
    "reportType": "weekly",
    "reportData": {
        "totalRevenue": 12500000,
        "totalStudents": 1234,
        "totalCourses": 42,
        "revenueChange": 12.5,
        "studentsChange": -3.2,
    },
}


def _add_course(db, published=True, course_id="course-1"):
    db.add(Course(
        id=course_id, title="Advanced TypeScript", description="Generics and types", price=10,
        category="Web Development", level="Advanced", instructor_id=INSTRUCTOR_ID,
        instructor_name="Lan Nguyen", approval_status="approved" if published else "pending",
        is_published=published,
    ))
    db.commit()


def test_preflight_returns_empty_ok(client):
    response = client.options("/functions/v1/send-instructor-notification")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"


def test_instructor_notification_is_sent(client, users, mailer):
    response = client.post(
        "/functions/v1/send-instructor-notification", json=INSTRUCTOR_MAIL, headers=auth_headers(ADMIN_ID)
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "demo": False, "data": {"id": "msg-1"}}
    assert mailer.sent[0]["to"] == "minh@example.com"
    assert "Congratulations Minh Tran" in mailer.sent[0]["html"]


def test_demo_mode_reports_demo(client, users):
    demo = FakeMailer(configured=False)
    app.dependency_overrides[get_mail_sender] = lambda: demo

    response = client.post(
        "/functions/v1/send-course-approval-notification", json=COURSE_MAIL, headers=auth_headers(ADMIN_ID)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["demo"] is True
    assert demo.sent == []
    assert demo.demo_logged[0]["event"] == "course_rejected"


def test_provider_failure_returns_error(client, users):
    failing = FakeMailer(configured=True, failing=("lan@example.com",))
    app.dependency_overrides[get_mail_sender] = lambda: failing

    response = client.post(
        "/functions/v1/send-course-approval-notification", json=COURSE_MAIL, headers=auth_headers(ADMIN_ID)
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Mailbox unavailable: lan@example.com"}


def test_mail_functions_require_admin(client, users):
    response = client.post(
        "/functions/v1/send-instructor-notification", json=INSTRUCTOR_MAIL, headers=auth_headers(STUDENT_ID)
    )
    assert response.status_code == 403


def test_invalid_status_is_rejected(client, users):
    body = {**INSTRUCTOR_MAIL, "status": "maybe"}
    response = client.post("/functions/v1/send-instructor-notification", json=body, headers=auth_headers(ADMIN_ID))
    assert response.status_code == 422


def test_course_notification_without_followers(client, users, db):
    _add_course(db)
    response = client.post(
        "/functions/v1/send-course-notification", json=NEW_COURSE, headers=auth_headers(INSTRUCTOR_ID)
    )

    assert response.status_code == 200
    assert response.json()["message"] == "No followers to notify"
    assert response.json()["total_followers"] == 0


def test_course_notification_fans_out_to_followers(client, users, db, mailer):
    _add_course(db)
    make_user(db, "follower-a", "a@example.com", "Follower A", Role.STUDENT)
    db.add(InstructorFollow(user_id="follower-a", instructor_id=INSTRUCTOR_ID))
    db.add(InstructorFollow(user_id=STUDENT_ID, instructor_id=INSTRUCTOR_ID))
    db.commit()

    response = client.post(
        "/functions/v1/send-course-notification", json=NEW_COURSE, headers=auth_headers(INSTRUCTOR_ID)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Notified 2 followers"
    assert body["total_followers"] == 2
    assert body["emails_sent"] == 2
    assert body["demo"] is False
    assert {m["to"] for m in mailer.sent} == {"a@example.com", "student@example.com"}


def test_only_owner_or_admin_can_notify_followers(client, users, db):
    _add_course(db)
    response = client.post(
        "/functions/v1/send-course-notification", json=NEW_COURSE, headers=auth_headers(STUDENT_ID)
    )
    assert response.status_code == 403

    response = client.post(
        "/functions/v1/send-course-notification", json=NEW_COURSE, headers=auth_headers(ADMIN_ID)
    )
    assert response.status_code == 200


def test_course_notification_for_pending_course_is_refused(client, users, db, mailer):
    _add_course(db, published=False)
    db.add(InstructorFollow(user_id=STUDENT_ID, instructor_id=INSTRUCTOR_ID))
    db.commit()

    response = client.post(
        "/functions/v1/send-course-notification", json=NEW_COURSE, headers=auth_headers(INSTRUCTOR_ID)
    )

    assert response.status_code == 409
    assert response.json()["current_status"] == "pending"
    assert mailer.sent == []
    assert db.query(Notification).filter(Notification.user_id == STUDENT_ID).count() == 0


def test_course_notification_for_unknown_course(client, users):
    body = {**NEW_COURSE, "course_id": "missing"}
    response = client.post("/functions/v1/send-course-notification", json=body, headers=auth_headers(ADMIN_ID))
    assert response.status_code == 404


def test_course_notification_ignores_request_text(client, users, db, mailer):
    _add_course(db)
    db.add(InstructorFollow(user_id=STUDENT_ID, instructor_id=INSTRUCTOR_ID))
    db.commit()
    body = {**NEW_COURSE, "course_title": "Free money inside", "instructor_name": "Someone Else"}

    response = client.post("/functions/v1/send-course-notification", json=body, headers=auth_headers(INSTRUCTOR_ID))

    assert response.status_code == 200
    assert mailer.sent[0]["subject"] == "New course from Lan Nguyen!"
    assert "Advanced TypeScript" in mailer.sent[0]["html"]
    assert "Free money" not in mailer.sent[0]["html"]
    stored = db.query(Notification).filter(Notification.user_id == STUDENT_ID).one()
    assert "Free money" not in stored.message


def test_report_email_is_sent(client, users, mailer):
    response = client.post("/functions/v1/send-report-email", json=REPORT, headers=auth_headers(ADMIN_ID))

    assert response.status_code == 200
    assert response.json() == {"success": True, "demo": False, "data": {"id": "msg-1"}}
    assert mailer.sent[0]["to"] == "admin@example.com"
    assert mailer.sent[0]["subject"].startswith("Weekly statistics report - ")
    assert "12.500.000 ₫" in mailer.sent[0]["html"]


def test_report_email_demo_mode_returns_preview(client, users):
    demo = FakeMailer(configured=False)
    app.dependency_overrides[get_mail_sender] = lambda: demo

    response = client.post("/functions/v1/send-report-email", json=REPORT, headers=auth_headers(ADMIN_ID))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["demo"] is True
    assert body["preview"]["to"] == "admin@example.com"
    assert body["preview"]["reportType"] == "weekly"
    assert body["preview"]["reportData"]["totalCourses"] == 42
    assert demo.sent == []


def test_report_email_provider_failure(client, users):
    failing = FakeMailer(configured=True, failing=("admin@example.com",))
    app.dependency_overrides[get_mail_sender] = lambda: failing

    response = client.post("/functions/v1/send-report-email", json=REPORT, headers=auth_headers(ADMIN_ID))

    assert response.status_code == 500
    assert response.json() == {"error": "Mailbox unavailable: admin@example.com"}


def test_report_email_without_data_and_access_rules(client, users, mailer):
    response = client.options("/functions/v1/send-report-email")
    assert response.status_code == 200
    assert response.content == b""

    body = {"email": "admin@example.com", "reportType": "daily"}
    response = client.post("/functions/v1/send-report-email", json=body, headers=auth_headers(STUDENT_ID))
    assert response.status_code == 403

    response = client.post("/functions/v1/send-report-email", json=body, headers=auth_headers(ADMIN_ID))
    assert response.status_code == 200
    assert "Daily report" in mailer.sent[0]["html"]

    body = {"email": "admin@example.com", "reportType": "yearly"}
    response = client.post("/functions/v1/send-report-email", json=body, headers=auth_headers(ADMIN_ID))
    assert response.status_code == 422
