import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eduplatform.core.enums import Role
from eduplatform.core.exceptions import AuthorizationError
from eduplatform.models.user_role import UserRole
from eduplatform.services.store import insert_if_absent

logger = logging.getLogger(__name__)


def capabilities_of(db: Session, user_id: str) -> set[Role]:
    """
    user_roles 테이블에서 사용자의 역할을 매번 새로 읽어옵니다.
    승인 직후 역할이 바뀔 수 있으므로 캐싱하지 않습니다.
    """
    rows = db.query(UserRole.role).filter(UserRole.user_id == user_id).all()
    roles = set()
    for (role,) in rows:
        try:
            roles.add(Role(role))
        except ValueError:
            logger.warning(f"Unknown role '{role}' for user {user_id} ignored")
    return roles


def authorize(db: Session, user_id: str, required_role: Role) -> bool:
    try:
        return required_role in capabilities_of(db, user_id)
    except SQLAlchemyError as e:
        # 조회 실패 시 권한 없음으로 처리 (fail closed)
        logger.error(f"Role lookup failed for user {user_id}: {e}")
        db.rollback()
        return False


def require_role(db: Session, user_id: str, *roles: Role) -> None:
    """roles 중 하나라도 보유하지 않으면 AuthorizationError."""
    if not any(authorize(db, user_id, role) for role in roles):
        names = " or ".join(role.value for role in roles)
        raise AuthorizationError(f"This action requires the {names} role.")


def grant_role(db: Session, user_id: str, role: Role) -> bool:
    """이미 같은 (user, role) 이 있으면 아무 것도 하지 않고 False."""
    granted = insert_if_absent(db, UserRole, user_id=user_id, role=role.value)
    if granted:
        logger.info(f"Role granted - user: {user_id}, role: {role.value}")
    return granted
