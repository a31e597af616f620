"""근태 알림 조회/읽음 처리와 수신 설정 API 라우터입니다."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from workforce.database import get_db
from workforce.middleware.auth_middleware import get_current_user
from workforce.models.user import User
from workforce.schemas.notification import (
    MarkAllReadOut,
    NotificationOut,
    NotificationPreferenceOut,
    NotificationPreferenceUpdate,
)
from workforce.services import notification_service

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
def list_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.get_notifications(db, current_user.user_id, unread_only)


@router.patch("/{noti_id}/read", response_model=NotificationOut)
def mark_read(
    noti_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    noti = notification_service.mark_read(db, noti_id, current_user.user_id)
    if noti is None:
        raise HTTPException(status_code=404, detail="알림을 찾을 수 없습니다.")
    return noti


@router.post("/read-all", response_model=MarkAllReadOut)
def mark_all_read(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"updated": notification_service.mark_all_read(db, current_user.user_id)}


@router.get("/preferences", response_model=NotificationPreferenceOut)
def get_preferences(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return notification_service.get_or_create_preference(db, current_user.user_id)


@router.put("/preferences", response_model=NotificationPreferenceOut)
def update_preferences(
    data: NotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.update_preference(db, current_user.user_id, data.model_dump(exclude_none=True))
