from sqlalchemy.orm import Session

from eduplatform.core.enums import Role
from eduplatform.core.exceptions import ValidationError
from eduplatform.models.user_profile import UserProfile
from eduplatform.services.role_service import grant_role
from eduplatform.services.store import commit


def get_profile(db: Session, user_id: str) -> UserProfile | None:
    return db.query(UserProfile).filter(UserProfile.id == user_id).first()


def _ensure_email_available(db: Session, user_id: str, email: str) -> None:
    # email 은 unique. 다른 계정이 쓰고 있으면 저장 전에 422
    taken = db.query(UserProfile.id).filter(UserProfile.email == email, UserProfile.id != user_id).first()
    if taken:
        raise ValidationError("Email is already used by another account.", {"email": "This email is already in use."})


def sync_profile(db: Session, user_id: str, email: str | None, name: str | None) -> tuple[UserProfile, bool]:
    """
    인증 토큰의 정보로 프로필을 생성하거나 갱신합니다.
    처음 생성되는 사용자에게는 student 역할을 부여합니다.
    """
    if email:
        _ensure_email_available(db, user_id, email)
    profile = get_profile(db, user_id)
    created = profile is None
    if created:
        profile = UserProfile(id=user_id, email=email, full_name=name)
        db.add(profile)
        grant_role(db, user_id, Role.STUDENT)
    else:
        if email:
            profile.email = email
        if name:
            profile.full_name = name
    commit(db)
    db.refresh(profile)
    return profile, created


def display_name(db: Session, user_id: str) -> str:
    profile = get_profile(db, user_id)
    if profile and profile.full_name:
        return profile.full_name
    if profile and profile.email:
        return profile.email.split("@")[0]
    return "Instructor"
