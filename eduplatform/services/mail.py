"""Resend 기반 이메일 발송 채널."""

import logging

import httpx

from eduplatform.core.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class MailSender:
    """
    외부 메일 서비스 클라이언트.

    api_key 가 없으면 configured=False 인 demo 모드로 동작합니다.
    demo 모드 여부는 dispatcher 가 발송 전에 한 번 확인합니다.
    """

    def __init__(self, api_key: str | None, sender: str, api_url: str, timeout: float = 10.0):
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def send(self, to: str, subject: str, html: str) -> dict:
        if not self.configured:
            raise DeliveryError("Mail provider is not configured.")

        try:
            response = httpx.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.sender,
                    "to": [to],
                    "subject": subject,
                    "html": html,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"Failed to send email to {to}: {e}") from e

        if response.status_code not in (200, 201, 202):
            try:
                detail = response.json().get("message")
            except ValueError:
                detail = None
            raise DeliveryError(detail or f"Mail provider returned HTTP {response.status_code}")

        logger.info(f"Email sent - to: {to}, subject: {subject}")
        try:
            return response.json()
        except ValueError:
            return {}

    def log_demo(self, to: str, subject: str, event: str) -> None:
        logger.info(f"=== DEMO MODE - Email would be sent === to: {to}, subject: {subject}, event: {event}")
