from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import get_current_user_id
from eduplatform.schemas.user import FollowResponse, FollowListResponse
from eduplatform.services.follow_service import follow_instructor, unfollow_instructor, following_of

router = APIRouter()


@router.get("", response_model=FollowListResponse, summary="팔로우 중인 강사 목록")
def get_my_follows(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return FollowListResponse(instructor_ids=following_of(db, user_id))


@router.post("/{instructor_id}", response_model=FollowResponse, summary="강사 팔로우")
def follow(
    instructor_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    created = follow_instructor(db, user_id, instructor_id)
    return FollowResponse(
        instructor_id=instructor_id,
        following=True,
        message="Now following this instructor." if created else "Already following this instructor."
    )


@router.delete("/{instructor_id}", response_model=FollowResponse, summary="강사 언팔로우")
def unfollow(
    instructor_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    removed = unfollow_instructor(db, user_id, instructor_id)
    return FollowResponse(
        instructor_id=instructor_id,
        following=False,
        message="Unfollowed this instructor." if removed else "You were not following this instructor."
    )
