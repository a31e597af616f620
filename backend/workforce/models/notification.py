"""근태 이벤트(지각 출근, 승인, 반려) 알림과 사용자별 수신 설정 모델 정의입니다."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from workforce.database import Base
from workforce.utils.datetime_utils import to_storage, utcnow


def _now_utc():
    return to_storage(utcnow())


class Notification(Base):
    __tablename__ = "attendance_notification"

    noti_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    attendance_id = Column(Integer, ForeignKey("employee_attendance.attendance_id", ondelete="CASCADE"), nullable=True)
    noti_type = Column(String(30), nullable=False)  # attendance_late/attendance_approved/attendance_rejected
    title = Column(String(200), nullable=False)
    message = Column(Text)
    is_read = Column(Boolean, nullable=False, default=False)
    # daily 빈도에서 같은 유형 알림을 병합할 때 갱신된다.
    merged_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=_now_utc)

    user = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("idx_attendance_notification_user", "user_id", "is_read", "created_at"),
    )


class NotificationPreference(Base):
    __tablename__ = "attendance_notification_preference"

    pref_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, unique=True)
    approval_enabled = Column(Boolean, nullable=False, default=True)
    late_alert_enabled = Column(Boolean, nullable=False, default=True)
    frequency = Column(String(20), nullable=False, default="realtime")  # realtime/daily
    updated_at = Column(DateTime, nullable=False, default=_now_utc, onupdate=_now_utc)

    user = relationship("User", back_populates="notification_preference")
