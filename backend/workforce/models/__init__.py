"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from workforce.models.user import User
from workforce.models.attendance import AttendanceRecord, AttendanceBreak
from workforce.models.attendance_settings import AttendanceSettings
from workforce.models.notification import Notification, NotificationPreference

__all__ = [
    "User",
    "AttendanceRecord", "AttendanceBreak",
    "AttendanceSettings",
    "Notification", "NotificationPreference",
]
