"""Attendance Settings Service 도메인 서비스 레이어입니다. 회사별 근태 정책을 ShiftConfig로 변환합니다."""

import logging
from datetime import datetime, time
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import HTTPException
from sqlalchemy.orm import Session

from workforce.config import settings
from workforce.models.attendance_settings import AttendanceSettings
from workforce.utils.attendance_metrics import ShiftConfig
from workforce.utils.geo import GeofenceTarget, validate_coordinate

logger = logging.getLogger(__name__)


def _parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def get_settings_row(db: Session, company_id: int) -> Optional[AttendanceSettings]:
    return db.query(AttendanceSettings).filter(AttendanceSettings.company_id == company_id).first()


def default_shift_config() -> ShiftConfig:
    return ShiftConfig(
        expected_start=_parse_hhmm(settings.DEFAULT_CHECK_IN_TIME),
        grace_minutes=settings.LATE_THRESHOLD_MINUTES,
        standard_shift_hours=settings.STANDARD_WORK_HOURS,
        unpaid_break_minutes=settings.UNPAID_BREAK_MINUTES,
        require_photo=settings.REQUIRE_PHOTO,
        require_location=settings.REQUIRE_LOCATION,
        geofence=None,
        allow_breaks=settings.ALLOW_BREAKS,
        max_breaks_per_day=settings.MAX_BREAKS_PER_DAY,
        timezone=settings.ATTENDANCE_TIMEZONE,
    )


def to_shift_config(row: AttendanceSettings) -> ShiftConfig:
    geofence = None
    if row.office_latitude is not None and row.office_longitude is not None:
        geofence = GeofenceTarget(
            latitude=row.office_latitude,
            longitude=row.office_longitude,
            allowed_radius_meters=row.location_radius_meters,
        )
    return ShiftConfig(
        expected_start=row.default_check_in_time,
        grace_minutes=row.late_threshold_minutes,
        standard_shift_hours=row.standard_work_hours,
        unpaid_break_minutes=row.unpaid_break_minutes,
        require_photo=bool(row.require_photo),
        require_location=bool(row.require_location),
        geofence=geofence,
        allow_breaks=bool(row.allow_breaks),
        max_breaks_per_day=row.max_breaks_per_day,
        timezone=row.timezone,
    )


def get_shift_config(db: Session, company_id: int) -> ShiftConfig:
    row = get_settings_row(db, company_id)
    if row is None:
        return default_shift_config()
    return to_shift_config(row)


def _validate_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"알 수 없는 시간대입니다: {name}")
    return name


def upsert_settings(db: Session, company_id: int, data: dict) -> AttendanceSettings:
    has_lat = data.get("office_latitude") is not None
    has_lon = data.get("office_longitude") is not None
    if has_lat != has_lon:
        raise HTTPException(status_code=400, detail="근무지 위도와 경도는 함께 입력해야 합니다.")
    if has_lat:
        validate_coordinate(data["office_latitude"], data["office_longitude"])
    _validate_timezone(data["timezone"])

    row = get_settings_row(db, company_id)
    if row is None:
        row = AttendanceSettings(company_id=company_id)
        db.add(row)
    for key, value in data.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    logger.info("attendance settings updated: company_id=%s", company_id)
    return row


def describe_settings(db: Session, company_id: int) -> dict:
    """Settings as stored, or the configured defaults when the company has none."""
    row = get_settings_row(db, company_id)
    if row is not None:
        return {
            "company_id": company_id,
            "is_default": False,
            "default_check_in_time": row.default_check_in_time,
            "late_threshold_minutes": row.late_threshold_minutes,
            "standard_work_hours": row.standard_work_hours,
            "unpaid_break_minutes": row.unpaid_break_minutes,
            "require_photo": row.require_photo,
            "require_location": row.require_location,
            "office_latitude": row.office_latitude,
            "office_longitude": row.office_longitude,
            "location_radius_meters": row.location_radius_meters,
            "allow_breaks": row.allow_breaks,
            "max_breaks_per_day": row.max_breaks_per_day,
            "timezone": row.timezone,
        }
    shift = default_shift_config()
    return {
        "company_id": company_id,
        "is_default": True,
        "default_check_in_time": shift.expected_start,
        "late_threshold_minutes": shift.grace_minutes,
        "standard_work_hours": shift.standard_shift_hours,
        "unpaid_break_minutes": shift.unpaid_break_minutes,
        "require_photo": shift.require_photo,
        "require_location": shift.require_location,
        "office_latitude": None,
        "office_longitude": None,
        "location_radius_meters": settings.LOCATION_RADIUS_METERS,
        "allow_breaks": shift.allow_breaks,
        "max_breaks_per_day": shift.max_breaks_per_day,
        "timezone": shift.timezone,
    }
