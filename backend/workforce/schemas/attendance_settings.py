"""회사 근태 정책 요청/응답 스키마입니다."""

from datetime import time
from typing import Optional

from pydantic import BaseModel, Field


class AttendanceSettingsBase(BaseModel):
    default_check_in_time: time = time(9, 0)
    late_threshold_minutes: int = Field(default=15, ge=0, le=720)
    standard_work_hours: float = Field(default=8.0, gt=0, le=24)
    unpaid_break_minutes: int = Field(default=0, ge=0, le=720)
    require_photo: bool = True
    require_location: bool = True
    office_latitude: Optional[float] = None
    office_longitude: Optional[float] = None
    location_radius_meters: float = Field(default=50.0, ge=0)
    allow_breaks: bool = True
    max_breaks_per_day: int = Field(default=0, ge=0)
    timezone: str = "UTC"


class AttendanceSettingsUpdate(AttendanceSettingsBase):
    pass


class AttendanceSettingsOut(AttendanceSettingsBase):
    company_id: int
    is_default: bool
