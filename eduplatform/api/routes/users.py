from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from eduplatform.core.exceptions import NotFoundError
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import CurrentUser, get_current_user, get_current_user_id
from eduplatform.schemas.user import UserProfileResponse, UserRoleListResponse
from eduplatform.services.profile_service import sync_profile, get_profile
from eduplatform.services.role_service import capabilities_of

router = APIRouter()


def _sorted_roles(db: Session, user_id: str) -> list[str]:
    return sorted(role.value for role in capabilities_of(db, user_id))


@router.post("/me", response_model=UserProfileResponse, summary="토큰 정보로 프로필 생성/갱신")
def sync_my_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    인증 토큰의 email, name 으로 프로필을 저장합니다.
    최초 호출 시 student 역할이 부여됩니다.
    """
    profile, created = sync_profile(db, user.id, user.email, user.name)
    return UserProfileResponse(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        roles=_sorted_roles(db, user.id),
        created_at=profile.created_at,
        message="Profile created." if created else "Profile updated."
    )


@router.get("/me", response_model=UserProfileResponse, summary="내 프로필 조회")
def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    profile = get_profile(db, user_id)
    if not profile:
        raise NotFoundError("Profile not found.")
    return UserProfileResponse(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        roles=_sorted_roles(db, user_id),
        created_at=profile.created_at,
    )


@router.get("/me/roles", response_model=UserRoleListResponse, summary="내 역할 조회")
def get_my_roles(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return UserRoleListResponse(roles=_sorted_roles(db, user_id))
