"""근태 출퇴근/휴식/승인 요청·응답 스키마입니다."""

from datetime import date, datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from workforce.utils.attendance_metrics import format_hours, round_hours
from workforce.utils.datetime_utils import ensure_utc


class AttendanceCaptureRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    photo: Optional[str] = None  # data:image/...;base64,...
    device_info: Optional[dict[str, Any]] = Field(default=None, alias="deviceInfo")
    notes: Optional[str] = Field(default=None, max_length=1000)

    model_config = {"populate_by_name": True}


class BreakRequest(BaseModel):
    action: Literal["start", "end"]


class AttendanceBreakOut(BaseModel):
    break_id: int
    started_at: datetime
    ended_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("started_at", "ended_at")
    @classmethod
    def _as_utc(cls, value):
        return ensure_utc(value)


class AttendanceRecordOut(BaseModel):
    attendance_id: int
    employee_id: int
    company_id: int
    attendance_date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: Optional[str] = None
    break_duration_minutes: int = 0
    total_hours: Optional[float] = None
    overtime_hours: Optional[float] = None
    approval_status: Optional[str] = None
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_accuracy: Optional[float] = None
    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None
    location_verified: Optional[bool] = None
    distance_from_office: Optional[float] = None
    check_in_photo: Optional[str] = None
    check_out_photo: Optional[str] = None
    notes: Optional[str] = None
    breaks: List[AttendanceBreakOut] = []

    model_config = {"from_attributes": True}

    @field_validator("check_in", "check_out", "reviewed_at")
    @classmethod
    def _as_utc(cls, value):
        return ensure_utc(value)

    @computed_field
    @property
    def total_hours_display(self) -> Optional[str]:
        return format_hours(self.total_hours)

    @computed_field
    @property
    def total_hours_rounded(self) -> Optional[float]:
        return round_hours(self.total_hours)


class TodayStatusOut(BaseModel):
    work_date: date
    state: Literal["not_started", "checked_in", "on_break", "checked_out"]
    can_check_in: bool
    can_start_break: bool
    can_end_break: bool
    can_check_out: bool
    attendance: Optional[AttendanceRecordOut] = None


class AttendanceSummaryOut(BaseModel):
    total_days: int
    present_days: int
    late_days: int
    absent_days: int
    total_hours: float
    average_hours: float
    overtime_hours: float
    pending_approvals: int

    @field_validator("total_hours", "average_hours", "overtime_hours")
    @classmethod
    def _round(cls, value):
        return round(value, 2)


class MonthlyAttendanceOut(BaseModel):
    month: str
    attendance: List[AttendanceRecordOut]
    summary: AttendanceSummaryOut


class ApprovalRequest(BaseModel):
    attendance_ids: List[int] = Field(min_length=1)
    action: Literal["approve", "reject"]
    rejection_reason: Optional[str] = None


class ApprovalResultOut(BaseModel):
    attendance_id: int
    success: bool
    approval_status: Optional[str] = None
    code: Optional[str] = None
    detail: Optional[str] = None

    model_config = {"from_attributes": True}


class ApprovalResponse(BaseModel):
    results: List[ApprovalResultOut]
    succeeded: int
    failed: int
