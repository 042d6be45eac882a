import time

from eduplatform.core.enums import Role
from eduplatform.core.exceptions import DeliveryError
from eduplatform.dependencies.auth import create_access_token
from eduplatform.models.user_profile import UserProfile
from eduplatform.services.mail import MailSender
from eduplatform.services.role_service import grant_role

ADMIN_ID = "admin-0001"
INSTRUCTOR_ID = "instructor-0001"
STUDENT_ID = "student-0001"


class FakeMailer(MailSender):
    """실제 HTTP 호출 없이 발송 내역만 기록하는 MailSender."""

    def __init__(self, configured: bool = True, failing: tuple = (), timeout: float = 2.0, delays: dict | None = None):
        super().__init__(
            api_key="re_test_key" if configured else None,
            sender="EduPlatform <test@example.com>",
            api_url="https://mail.invalid/emails",
            timeout=timeout,
        )
        self.failing = set(failing)
        self.delays = delays or {}
        self.sent = []
        self.demo_logged = []

    def send(self, to, subject, html):
        if to in self.delays:
            time.sleep(self.delays[to])
        if to in self.failing:
            raise DeliveryError(f"Mailbox unavailable: {to}")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"msg-{len(self.sent)}"}

    def log_demo(self, to, subject, event):
        super().log_demo(to, subject, event)
        self.demo_logged.append({"to": to, "subject": subject, "event": event})


def auth_headers(user_id: str, email: str | None = None, name: str | None = None) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, email=email, name=name)}"}


def make_user(db, user_id: str, email: str | None, full_name: str | None, *roles: Role) -> UserProfile:
    profile = UserProfile(id=user_id, email=email, full_name=full_name)
    db.add(profile)
    db.flush()
    for role in roles:
        grant_role(db, user_id, role)
    db.commit()
    return profile
