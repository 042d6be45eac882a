from sqlalchemy.orm import Session

from eduplatform.core.exceptions import ValidationError
from eduplatform.models.instructor_follow import InstructorFollow
from eduplatform.services.store import insert_if_absent, commit


def follow_instructor(db: Session, user_id: str, instructor_id: str) -> bool:
    """이미 팔로우 중이면 False."""
    if user_id == instructor_id:
        raise ValidationError("You cannot follow yourself.", {"instructor_id": "Cannot follow yourself."})
    created = insert_if_absent(db, InstructorFollow, user_id=user_id, instructor_id=instructor_id)
    commit(db)
    return created


def unfollow_instructor(db: Session, user_id: str, instructor_id: str) -> bool:
    deleted = (
        db.query(InstructorFollow)
        .filter(InstructorFollow.user_id == user_id, InstructorFollow.instructor_id == instructor_id)
        .delete(synchronize_session=False)
    )
    commit(db)
    return deleted > 0


def followers_of(db: Session, instructor_id: str) -> list[str]:
    rows = (
        db.query(InstructorFollow.user_id)
        .filter(InstructorFollow.instructor_id == instructor_id)
        .order_by(InstructorFollow.created_at)
        .all()
    )
    return [row.user_id for row in rows]


def following_of(db: Session, user_id: str) -> list[str]:
    rows = db.query(InstructorFollow.instructor_id).filter(InstructorFollow.user_id == user_id).all()
    return [row.instructor_id for row in rows]
