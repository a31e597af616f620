"""Attendance Service 도메인 서비스 레이어입니다. 출근/휴식/퇴근 상태 전이와 파생 근무시간 계산을 담당합니다.

하루 근태 기록은 (employee_id, attendance_date)로 식별되며 다음 순서로만 전이합니다.

    not_started -> checked_in -> (on_break <-> checked_in)* -> checked_out

모든 전이는 하나의 트랜잭션으로 커밋되며 version 컬럼(optimistic lock)과
(employee_id, attendance_date) 유니크 제약으로 같은 기록에 대한 동시 쓰기를 직렬화합니다.
충돌이 감지되면 전체 연산을 처음부터 다시 평가하므로 늦게 도착한 요청은
올바른 상태 충돌 오류(AlreadyCheckedIn 등)로 끝납니다.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from workforce.config import settings
from workforce.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    AttendanceError,
    AttendanceRecordNotFound,
    AttendanceStoreUnavailable,
    AttendanceWriteFailed,
    BreakAlreadyOpen,
    BreakBeforeCheckIn,
    BreakEndBeforeStart,
    BreakLimitReached,
    BreaksNotAllowed,
    CheckOutBeforeBreakEnd,
    CheckOutBeforeCheckIn,
    ConcurrentModification,
    LocationRequired,
    NoOpenBreak,
    NotCheckedIn,
    OpenBreakPending,
    OutsideGeofence,
    PhotoRequired,
)
from workforce.models.attendance import AttendanceBreak, AttendanceRecord
from workforce.models.user import User
from workforce.services import notification_service
from workforce.utils import attendance_metrics
from workforce.utils.attendance_codes import (
    CHECKED_IN,
    CHECKED_OUT,
    LATE,
    NOTI_LATE,
    NOT_STARTED,
    ON_BREAK,
    PENDING,
)
from workforce.utils.attendance_metrics import ShiftConfig
from workforce.utils.datetime_utils import ensure_utc, to_local, to_storage, utcnow
from workforce.utils.geo import Coordinate, distance_to_target, validate_coordinate
from workforce.utils.permissions import can_view_record
from workforce.utils.photo_storage import delete_attendance_photo, save_attendance_photo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureContext:
    """What the client captured at the moment of check-in/out."""

    location: Optional[Coordinate] = None
    photo: Optional[str] = None
    device_info: Optional[dict] = None
    ip_address: Optional[str] = None
    notes: Optional[str] = None


def get_record(db: Session, employee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.employee_id == employee_id,
            AttendanceRecord.attendance_date == attendance_date,
        )
        .populate_existing()
        .first()
    )


def get_record_for_user(db: Session, attendance_id: int, user: User) -> AttendanceRecord:
    record = db.get(AttendanceRecord, attendance_id)
    if record is None or not can_view_record(user, record):
        raise AttendanceRecordNotFound()
    return record


def open_break(record: AttendanceRecord) -> Optional[AttendanceBreak]:
    for session in record.breaks:
        if session.ended_at is None:
            return session
    return None


def attendance_state(record: Optional[AttendanceRecord]) -> str:
    if record is None or record.check_in is None:
        return NOT_STARTED
    if record.check_out is not None:
        return CHECKED_OUT
    if open_break(record) is not None:
        return ON_BREAK
    return CHECKED_IN


def recompute_derived(record: AttendanceRecord, shift: ShiftConfig) -> None:
    record.break_duration_minutes = attendance_metrics.break_duration_minutes(
        (b.started_at, b.ended_at) for b in record.breaks
    )
    if record.check_in is None or record.check_out is None:
        record.total_hours = None
        record.overtime_hours = None
        return
    hours = attendance_metrics.total_hours(
        record.check_in,
        record.check_out,
        record.break_duration_minutes,
        shift.unpaid_break_minutes,
    )
    record.total_hours = hours
    record.overtime_hours = attendance_metrics.overtime_hours(hours, shift.standard_shift_hours)


def device_fingerprint(device_info: Optional[dict]) -> Optional[str]:
    if not device_info:
        return None
    return "{}-{}-{}x{}".format(
        device_info.get("userAgent") or "",
        device_info.get("platform") or "",
        device_info.get("screenWidth") or "",
        device_info.get("screenHeight") or "",
    )[:300]


def _verify_location(location: Optional[Coordinate], shift: ShiftConfig) -> tuple[Optional[bool], Optional[float]]:
    if location is None:
        if shift.require_location:
            raise LocationRequired()
        return None, None

    validate_coordinate(location.latitude, location.longitude)
    if shift.geofence is None:
        return None, None

    distance = distance_to_target(location, shift.geofence)
    inside = distance <= shift.geofence.allowed_radius_meters
    if not inside and shift.geofence_required:
        raise OutsideGeofence(
            f"근무지로부터 {distance:.0f}m 떨어져 있습니다. (허용 반경 {shift.geofence.allowed_radius_meters:.0f}m)"
        )
    return inside, distance


def _require_photo(capture: CaptureContext, shift: ShiftConfig) -> None:
    if shift.require_photo and not capture.photo:
        raise PhotoRequired()


def _store_photo(capture: CaptureContext, employee_id: int, attendance_date: date, kind: str, saved: List[str]) -> Optional[str]:
    if not capture.photo:
        return None
    photo_ref = save_attendance_photo(capture.photo, employee_id, attendance_date, kind)
    saved.append(photo_ref)
    return photo_ref


def _discard_photos(saved: List[str]) -> None:
    for photo_ref in saved:
        delete_attendance_photo(photo_ref)
    saved.clear()


def _last_break_end(record: AttendanceRecord) -> datetime:
    """Latest of check-in and every closed break's end; later events may not precede it."""
    latest = ensure_utc(record.check_in)
    for session in record.breaks:
        if session.ended_at is not None:
            latest = max(latest, ensure_utc(session.ended_at))
    return latest


def _touch(record: AttendanceRecord) -> None:
    # 휴식 구간만 바뀌는 경우에도 부모 행을 UPDATE 하여 version 검사를 거치게 한다.
    record.updated_at = to_storage(utcnow())


def _commit_with_retry(
    db: Session,
    action: str,
    employee_id: int,
    attendance_date: date,
    mutate: Callable[[List[str]], AttendanceRecord],
) -> AttendanceRecord:
    attempts = max(1, settings.ATTENDANCE_WRITE_RETRIES)
    for attempt in range(1, attempts + 1):
        saved: List[str] = []
        try:
            record = mutate(saved)
            db.commit()
        except AttendanceError as exc:
            db.rollback()
            _discard_photos(saved)
            logger.info(
                "%s rejected: employee_id=%s date=%s code=%s",
                action, employee_id, attendance_date, exc.code,
            )
            raise
        except (StaleDataError, IntegrityError) as exc:
            db.rollback()
            _discard_photos(saved)
            logger.warning(
                "%s write conflict (attempt %s/%s): employee_id=%s date=%s: %s",
                action, attempt, attempts, employee_id, attendance_date, exc.__class__.__name__,
            )
            continue
        except OperationalError:
            db.rollback()
            _discard_photos(saved)
            logger.error(
                "%s failed, attendance store unavailable: employee_id=%s date=%s",
                action, employee_id, attendance_date,
                exc_info=True,
            )
            raise AttendanceStoreUnavailable()
        except SQLAlchemyError:
            db.rollback()
            _discard_photos(saved)
            logger.error(
                "%s failed: employee_id=%s date=%s",
                action, employee_id, attendance_date,
                exc_info=True,
            )
            raise AttendanceWriteFailed()

        db.refresh(record)
        logger.info(
            "%s ok: employee_id=%s date=%s attendance_id=%s state=%s",
            action, employee_id, attendance_date, record.attendance_id, attendance_state(record),
        )
        return record

    raise ConcurrentModification()


def check_in(
    db: Session,
    employee: User,
    attendance_date: date,
    timestamp: datetime,
    shift: ShiftConfig,
    capture: CaptureContext = CaptureContext(),
) -> AttendanceRecord:
    def mutate(saved: List[str]) -> AttendanceRecord:
        record = get_record(db, employee.user_id, attendance_date)
        if record is not None and record.check_in is not None:
            raise AlreadyCheckedIn()

        verified, distance = _verify_location(capture.location, shift)
        _require_photo(capture, shift)
        photo_ref = _store_photo(capture, employee.user_id, attendance_date, "checkin", saved)

        if record is None:
            # 하루 첫 출근이 기록을 생성한다.
            record = AttendanceRecord(
                employee_id=employee.user_id,
                company_id=employee.company_id,
                attendance_date=attendance_date,
                break_duration_minutes=0,
                method="web",
            )
            db.add(record)

        record.check_in = to_storage(timestamp)
        record.status = attendance_metrics.classify_check_in(timestamp, shift)
        if capture.location is not None:
            record.latitude = capture.location.latitude
            record.longitude = capture.location.longitude
            record.location_accuracy = capture.location.accuracy
        record.location_verified = verified
        record.distance_from_office = distance
        record.check_in_photo = photo_ref
        record.notes = capture.notes or record.notes
        record.ip_address = capture.ip_address
        record.device_info = capture.device_info
        record.device_fingerprint = device_fingerprint(capture.device_info)
        recompute_derived(record, shift)
        _touch(record)
        return record

    record = _commit_with_retry(db, "check_in", employee.user_id, attendance_date, mutate)
    if record.status == LATE:
        _notify_late_check_in(db, employee, record, shift)
    return record


def start_break(
    db: Session,
    employee: User,
    attendance_date: date,
    timestamp: datetime,
    shift: ShiftConfig,
) -> AttendanceRecord:
    def mutate(saved: List[str]) -> AttendanceRecord:
        record = get_record(db, employee.user_id, attendance_date)
        if record is None or record.check_in is None:
            raise NotCheckedIn()
        if record.check_out is not None:
            raise AlreadyCheckedOut()
        if open_break(record) is not None:
            raise BreakAlreadyOpen()
        if not shift.allow_breaks:
            raise BreaksNotAllowed()
        if shift.max_breaks_per_day and len(record.breaks) >= shift.max_breaks_per_day:
            raise BreakLimitReached()

        if ensure_utc(timestamp) < _last_break_end(record):
            raise BreakBeforeCheckIn()

        record.breaks.append(AttendanceBreak(started_at=to_storage(timestamp)))
        recompute_derived(record, shift)
        _touch(record)
        return record

    return _commit_with_retry(db, "start_break", employee.user_id, attendance_date, mutate)


def end_break(
    db: Session,
    employee: User,
    attendance_date: date,
    timestamp: datetime,
    shift: ShiftConfig,
) -> AttendanceRecord:
    def mutate(saved: List[str]) -> AttendanceRecord:
        record = get_record(db, employee.user_id, attendance_date)
        if record is None or record.check_in is None:
            raise NotCheckedIn()
        current = open_break(record)
        if current is None:
            raise NoOpenBreak()
        if ensure_utc(timestamp) < ensure_utc(current.started_at):
            raise BreakEndBeforeStart()

        current.ended_at = to_storage(timestamp)
        recompute_derived(record, shift)
        _touch(record)
        return record

    return _commit_with_retry(db, "end_break", employee.user_id, attendance_date, mutate)


def check_out(
    db: Session,
    employee: User,
    attendance_date: date,
    timestamp: datetime,
    shift: ShiftConfig,
    capture: CaptureContext = CaptureContext(),
) -> AttendanceRecord:
    def mutate(saved: List[str]) -> AttendanceRecord:
        record = get_record(db, employee.user_id, attendance_date)
        if record is None or record.check_in is None:
            raise NotCheckedIn()
        if record.check_out is not None:
            raise AlreadyCheckedOut()
        if open_break(record) is not None:
            raise OpenBreakPending()

        verified, _ = _verify_location(capture.location, shift)
        _require_photo(capture, shift)
        if ensure_utc(timestamp) < ensure_utc(record.check_in):
            raise CheckOutBeforeCheckIn()
        if ensure_utc(timestamp) < _last_break_end(record):
            raise CheckOutBeforeBreakEnd()
        photo_ref = _store_photo(capture, employee.user_id, attendance_date, "checkout", saved)

        record.check_out = to_storage(timestamp)
        if capture.location is not None:
            record.check_out_latitude = capture.location.latitude
            record.check_out_longitude = capture.location.longitude
            record.check_out_accuracy = capture.location.accuracy
        if verified is not None:
            record.location_verified = verified if record.location_verified is None else (record.location_verified and verified)
        record.check_out_photo = photo_ref
        record.notes = capture.notes or record.notes
        if capture.ip_address:
            record.ip_address = capture.ip_address
        recompute_derived(record, shift)
        record.approval_status = PENDING
        record.rejection_reason = None
        _touch(record)
        return record

    return _commit_with_retry(db, "check_out", employee.user_id, attendance_date, mutate)


def get_today_status(db: Session, employee: User, attendance_date: date) -> dict:
    record = get_record(db, employee.user_id, attendance_date)
    state = attendance_state(record)
    return {
        "work_date": attendance_date,
        "state": state,
        "can_check_in": state == NOT_STARTED,
        "can_start_break": state == CHECKED_IN,
        "can_end_break": state == ON_BREAK,
        "can_check_out": state == CHECKED_IN,
        "attendance": record,
    }


def _notify_late_check_in(db: Session, employee: User, record: AttendanceRecord, shift: ShiftConfig) -> None:
    local_time = to_local(record.check_in, shift.timezone).strftime("%H:%M")
    try:
        notification_service.notify_reviewers(
            db,
            employee.company_id,
            NOTI_LATE,
            f"{employee.name} 지각 출근",
            message=f"{record.attendance_date.isoformat()} {local_time} 출근 (기준 {shift.expected_start.strftime('%H:%M')})",
            attendance_id=record.attendance_id,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("late check-in notification skipped: attendance_id=%s: %s", record.attendance_id, exc)
