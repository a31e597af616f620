"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from workforce.models.user import User
from workforce.models.attendance import AttendanceRecord


ADMIN = "admin"
MANAGER = "manager"
EMPLOYEE = "employee"

REVIEWER_ROLES = (ADMIN, MANAGER)


def is_reviewer(user: User) -> bool:
    return user.role in REVIEWER_ROLES


def can_review_record(user: User, record: AttendanceRecord) -> bool:
    if not is_reviewer(user):
        return False
    return record.company_id == user.company_id


def can_view_record(user: User, record: AttendanceRecord) -> bool:
    if record.employee_id == user.user_id:
        return True
    return can_review_record(user, record)
