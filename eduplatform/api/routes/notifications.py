from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import get_current_user_id
from eduplatform.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    UnreadCountResponse,
    MarkAllReadResponse,
)
from eduplatform.services.notification_service import (
    list_notifications,
    unread_count,
    mark_as_read,
    mark_all_as_read,
    delete_notification,
)

router = APIRouter()


@router.get("", response_model=NotificationListResponse, summary="내 알림 목록 조회")
def get_my_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return {
        "notifications": list_notifications(db, user_id, unread_only=unread_only, limit=limit),
        "unread_count": unread_count(db, user_id),
    }


@router.get("/unread-count", response_model=UnreadCountResponse, summary="읽지 않은 알림 수")
def get_unread_count(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return UnreadCountResponse(unread_count=unread_count(db, user_id))


@router.patch("/{notification_id}/read", response_model=NotificationResponse, summary="알림 읽음 처리")
def read_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return mark_as_read(db, user_id, notification_id)


@router.post("/read-all", response_model=MarkAllReadResponse, summary="모든 알림 읽음 처리")
def read_all_notifications(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return MarkAllReadResponse(updated=mark_all_as_read(db, user_id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT, summary="알림 삭제")
def remove_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    delete_notification(db, user_id, notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
