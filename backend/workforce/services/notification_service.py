"""Notification Service 도메인 서비스 레이어입니다. 근태 이벤트 알림을 수신 설정에 맞춰 적재하고 조회/읽음 처리합니다.

알림 적재는 근태 상태 변경이 커밋된 이후에 호출되며, 여러 수신자에 대한 알림은
한 번의 커밋으로 저장합니다.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from workforce.models.notification import Notification, NotificationPreference
from workforce.models.user import User
from workforce.utils.attendance_codes import NOTI_APPROVED, NOTI_LATE, NOTI_REJECTED
from workforce.utils.datetime_utils import to_storage, utcnow
from workforce.utils.permissions import REVIEWER_ROLES

logger = logging.getLogger(__name__)

REALTIME = "realtime"
DAILY = "daily"
SUPPORTED_FREQUENCIES = (REALTIME, DAILY)

# 알림 유형 -> 이를 켜고 끄는 NotificationPreference 컬럼
PREFERENCE_FLAGS = {
    NOTI_LATE: "late_alert_enabled",
    NOTI_APPROVED: "approval_enabled",
    NOTI_REJECTED: "approval_enabled",
}

LIST_LIMIT = 50


def get_notifications(db: Session, user_id: int, unread_only: bool = False) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)
    return q.order_by(Notification.created_at.desc(), Notification.noti_id.desc()).limit(LIST_LIMIT).all()


def mark_read(db: Session, noti_id: int, user_id: int) -> Optional[Notification]:
    noti = (
        db.query(Notification)
        .filter(Notification.noti_id == noti_id, Notification.user_id == user_id)
        .first()
    )
    if noti is None:
        return None
    noti.is_read = True
    db.commit()
    db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)
        .update({"is_read": True}, synchronize_session=False)
    )
    db.commit()
    return updated


def _load_preference(db: Session, user_id: int) -> Optional[NotificationPreference]:
    return db.query(NotificationPreference).filter(NotificationPreference.user_id == user_id).first()


def get_or_create_preference(db: Session, user_id: int) -> NotificationPreference:
    pref = _load_preference(db, user_id)
    if pref is None:
        pref = NotificationPreference(
            user_id=user_id,
            approval_enabled=True,
            late_alert_enabled=True,
            frequency=REALTIME,
        )
        db.add(pref)
        db.commit()
        db.refresh(pref)
    return pref


def update_preference(db: Session, user_id: int, changes: dict) -> NotificationPreference:
    pref = get_or_create_preference(db, user_id)
    for key in ("approval_enabled", "late_alert_enabled"):
        if key in changes:
            setattr(pref, key, bool(changes[key]))
    if "frequency" in changes:
        freq = (changes["frequency"] or "").strip().lower()
        pref.frequency = freq if freq in SUPPORTED_FREQUENCIES else REALTIME
    db.commit()
    db.refresh(pref)
    return pref


def _wants(pref: Optional[NotificationPreference], noti_type: str) -> bool:
    # 설정 행이 없으면 기본값(모두 수신, realtime)을 따른다.
    if pref is None:
        return True
    flag = PREFERENCE_FLAGS.get(noti_type)
    return flag is None or bool(getattr(pref, flag))


def _stage(
    db: Session,
    user_id: int,
    noti_type: str,
    title: str,
    message: Optional[str],
    attendance_id: Optional[int],
) -> Optional[Notification]:
    pref = _load_preference(db, user_id)
    if not _wants(pref, noti_type):
        return None

    if pref is not None and pref.frequency == DAILY:
        start_of_day = to_storage(utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
        existing = (
            db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.noti_type == noti_type,
                Notification.created_at >= start_of_day,
            )
            .order_by(Notification.created_at.desc(), Notification.noti_id.desc())
            .first()
        )
        if existing is not None:
            existing.title = title
            existing.message = message
            existing.attendance_id = attendance_id
            existing.is_read = False
            existing.merged_count = (existing.merged_count or 1) + 1
            return existing

    noti = Notification(
        user_id=user_id,
        attendance_id=attendance_id,
        noti_type=noti_type,
        title=title,
        message=message,
    )
    db.add(noti)
    return noti


def notify_users(
    db: Session,
    user_ids: Iterable[int],
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    attendance_id: Optional[int] = None,
) -> List[Notification]:
    staged = []
    for user_id in dict.fromkeys(user_ids):
        noti = _stage(db, user_id, noti_type, title, message, attendance_id)
        if noti is not None:
            staged.append(noti)
            # daily 병합 조회가 같은 배치에서 방금 추가한 행을 보도록 한다.
            db.flush()
    db.commit()
    logger.info("notifications sent: type=%s attendance_id=%s recipients=%s", noti_type, attendance_id, len(staged))
    return staged


def notify_reviewers(
    db: Session,
    company_id: int,
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    attendance_id: Optional[int] = None,
) -> List[Notification]:
    reviewer_ids = [
        user_id
        for (user_id,) in db.query(User.user_id).filter(
            User.company_id == company_id,
            User.role.in_(REVIEWER_ROLES),
            User.is_active == True,
        )
    ]
    return notify_users(db, reviewer_ids, noti_type, title, message, attendance_id)
