from eduplatform.core.config import settings
from eduplatform.services.mail import MailSender

_mail_sender: MailSender | None = None


def get_mail_sender() -> MailSender:
    """설정값 기반 MailSender 싱글톤. 테스트에서는 dependency_overrides 로 교체."""
    global _mail_sender
    if _mail_sender is None:
        _mail_sender = MailSender(
            api_key=settings.RESEND_API_KEY,
            sender=settings.MAIL_FROM,
            api_url=settings.RESEND_API_URL,
            timeout=settings.EMAIL_TIMEOUT_SECONDS,
        )
    return _mail_sender
