from fastapi import Depends
from sqlalchemy.orm import Session

from eduplatform.core.enums import Role
from eduplatform.dependencies.auth import CurrentUser, get_current_user
from eduplatform.dependencies.db import get_db
from eduplatform.services.role_service import require_role


def get_current_admin(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> CurrentUser:
    require_role(db, user.id, Role.ADMIN)
    return user


def get_current_instructor(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> CurrentUser:
    # 관리자도 강의 개설 가능
    require_role(db, user.id, Role.INSTRUCTOR, Role.ADMIN)
    return user
