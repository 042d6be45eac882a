"""
도메인 예외 정의.

서비스 계층은 HTTPException 대신 아래 예외를 발생시키고,
main.py 에 등록된 exception handler 가 HTTP 응답으로 변환합니다.
"""


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 422

    def __init__(self, message: str = "Invalid input.", errors: dict | None = None):
        super().__init__(message)
        self.errors = errors or {}


class AuthorizationError(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class InvalidStateError(DomainError):
    status_code = 409

    def __init__(self, message: str, current_status: str | None = None):
        super().__init__(message)
        self.current_status = current_status


class PersistenceError(DomainError):
    status_code = 500


class DeliveryError(DomainError):
    """수신자 1명에 대한 메일 발송 실패. dispatcher 밖으로 전파되지 않음."""
    status_code = 502
