"""일자 기반 출근/휴식/퇴근 API 라우터입니다."""

from datetime import date, datetime
from typing import Callable

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from workforce.database import get_db
from workforce.exceptions import InvalidCoordinate
from workforce.middleware.auth_middleware import get_current_user
from workforce.models.user import User
from workforce.schemas.attendance import (
    AttendanceCaptureRequest,
    AttendanceRecordOut,
    BreakRequest,
    MonthlyAttendanceOut,
    TodayStatusOut,
)
from workforce.services import (
    approval_service,
    attendance_service,
    attendance_settings_service,
    attendance_summary_service,
)
from workforce.utils.datetime_utils import local_date, utcnow
from workforce.utils.geo import Coordinate

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


def get_clock() -> Callable[[], datetime]:
    return utcnow


def _get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def _to_capture(body: AttendanceCaptureRequest, request: Request) -> attendance_service.CaptureContext:
    location = None
    if body.latitude is not None or body.longitude is not None:
        if body.latitude is None or body.longitude is None:
            raise InvalidCoordinate("위도와 경도를 함께 보내야 합니다.")
        location = Coordinate(latitude=body.latitude, longitude=body.longitude, accuracy=body.accuracy)
    return attendance_service.CaptureContext(
        location=location,
        photo=body.photo,
        device_info=body.device_info,
        ip_address=_get_client_ip(request),
        notes=body.notes,
    )


@router.get("/today", response_model=TodayStatusOut)
def get_today_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    shift = attendance_settings_service.get_shift_config(db, current_user.company_id)
    return attendance_service.get_today_status(db, current_user, local_date(clock(), shift.timezone))


@router.post("/check-in", response_model=AttendanceRecordOut)
def check_in(
    body: AttendanceCaptureRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    now = clock()
    shift = attendance_settings_service.get_shift_config(db, current_user.company_id)
    return attendance_service.check_in(
        db,
        current_user,
        local_date(now, shift.timezone),
        now,
        shift,
        _to_capture(body, request),
    )


@router.post("/check-out", response_model=AttendanceRecordOut)
def check_out(
    body: AttendanceCaptureRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    now = clock()
    shift = attendance_settings_service.get_shift_config(db, current_user.company_id)
    return attendance_service.check_out(
        db,
        current_user,
        local_date(now, shift.timezone),
        now,
        shift,
        _to_capture(body, request),
    )


@router.post("/break", response_model=AttendanceRecordOut)
def toggle_break(
    body: BreakRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    now = clock()
    shift = attendance_settings_service.get_shift_config(db, current_user.company_id)
    work_date = local_date(now, shift.timezone)
    if body.action == "start":
        return attendance_service.start_break(db, current_user, work_date, now, shift)
    return attendance_service.end_break(db, current_user, work_date, now, shift)


@router.get("/me", response_model=MonthlyAttendanceOut)
def get_my_attendance(
    month: str | None = Query(None, description="YYYY-MM"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    target_month = month or clock().strftime("%Y-%m")
    return attendance_summary_service.get_monthly_attendance(db, current_user, target_month)


@router.get("/records/{attendance_id}", response_model=AttendanceRecordOut)
def get_record(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return attendance_service.get_record_for_user(db, attendance_id, current_user)


@router.post("/{attendance_id}/resubmit", response_model=AttendanceRecordOut)
def resubmit(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return approval_service.resubmit(db, attendance_id, current_user)
