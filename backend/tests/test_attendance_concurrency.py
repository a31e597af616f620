"""동시 쓰기 충돌(버전 불일치, 유니크 제약 위반)과 저장소 장애 시 재시도/롤백 동작을 검증하는 테스트입니다."""

from datetime import date, datetime, timezone

import pytest
from sqlalchemy.exc import DataError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from workforce.config import settings
from workforce.exceptions import (
    AlreadyCheckedIn,
    AttendanceStoreUnavailable,
    AttendanceWriteFailed,
    ConcurrentModification,
)
from workforce.models.attendance import AttendanceRecord
from workforce.models.user import User
from workforce.services import attendance_service
from workforce.services.attendance_service import CaptureContext
from workforce.utils.attendance_codes import CHECKED_IN
from workforce.utils.attendance_metrics import ShiftConfig
from tests.conftest import PHOTO, TestingSession

WORK_DATE = date(2026, 3, 2)
LENIENT = ShiftConfig(require_photo=False, require_location=False)


def _at(hour, minute):
    return datetime(2026, 3, 2, hour, minute, tzinfo=timezone.utc)


def test_concurrent_first_check_in_yields_single_record(db, seed_users, monkeypatch):
    emp = seed_users["employee"]

    # 다른 요청이 먼저 같은 날짜의 기록을 만든 상황
    other = TestingSession()
    try:
        attendance_service.check_in(other, other.get(User, emp.user_id), WORK_DATE, _at(9, 0), LENIENT)
    finally:
        other.close()

    real_get_record = attendance_service.get_record
    calls = {"n": 0}

    def stale_first_read(session, employee_id, attendance_date):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_get_record(session, employee_id, attendance_date)

    monkeypatch.setattr(attendance_service, "get_record", stale_first_read)

    with pytest.raises(AlreadyCheckedIn):
        attendance_service.check_in(db, emp, WORK_DATE, _at(9, 1), LENIENT)

    assert calls["n"] == 2
    assert db.query(AttendanceRecord).filter(AttendanceRecord.employee_id == emp.user_id).count() == 1


def test_version_column_detects_lost_update(db, seed_users):
    emp = seed_users["employee"]
    record = attendance_service.check_in(db, emp, WORK_DATE, _at(9, 0), LENIENT)
    attendance_id = record.attendance_id
    version_before = record.version

    other = TestingSession()
    try:
        attendance_service.check_out(other, other.get(User, emp.user_id), WORK_DATE, _at(18, 0), LENIENT)
    finally:
        other.close()

    record.notes = "stale write"
    with pytest.raises(StaleDataError):
        db.commit()
    db.rollback()

    fresh = db.get(AttendanceRecord, attendance_id)
    db.refresh(fresh)
    assert fresh.version > version_before
    assert fresh.check_out is not None
    assert fresh.notes is None


def test_conflict_retries_exhausted(db, seed_users, monkeypatch):
    emp = seed_users["employee"]
    attendance_service.check_in(db, emp, WORK_DATE, _at(9, 0), LENIENT)

    monkeypatch.setattr(settings, "ATTENDANCE_WRITE_RETRIES", 2)
    commits = {"n": 0}

    def always_stale():
        commits["n"] += 1
        raise StaleDataError("row was updated concurrently")

    real_commit = db.commit
    monkeypatch.setattr(db, "commit", always_stale)
    with pytest.raises(ConcurrentModification):
        attendance_service.start_break(db, emp, WORK_DATE, _at(12, 0), LENIENT)
    assert commits["n"] == 2

    monkeypatch.setattr(db, "commit", real_commit)
    assert attendance_service.attendance_state(attendance_service.get_record(db, emp.user_id, WORK_DATE)) == CHECKED_IN


def test_conflict_then_success(db, seed_users, monkeypatch):
    emp = seed_users["employee"]
    attendance_service.check_in(db, emp, WORK_DATE, _at(9, 0), LENIENT)

    real_commit = db.commit
    commits = {"n": 0}

    def stale_once():
        commits["n"] += 1
        if commits["n"] == 1:
            raise StaleDataError("row was updated concurrently")
        real_commit()

    monkeypatch.setattr(db, "commit", stale_once)
    record = attendance_service.start_break(db, emp, WORK_DATE, _at(12, 0), LENIENT)
    assert commits["n"] == 2
    assert len(record.breaks) == 1


def test_store_unavailable_discards_photo(db, seed_users, upload_dir, monkeypatch):
    emp = seed_users["employee"]

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    real_commit = db.commit
    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(AttendanceStoreUnavailable) as exc_info:
        attendance_service.check_in(
            db, emp, WORK_DATE, _at(9, 0), ShiftConfig(require_location=False), CaptureContext(photo=PHOTO)
        )
    assert exc_info.value.status_code == 503

    saved = list((upload_dir / "attendance").rglob("*")) if (upload_dir / "attendance").exists() else []
    assert [p for p in saved if p.is_file()] == []

    monkeypatch.setattr(db, "commit", real_commit)
    assert attendance_service.get_record(db, emp.user_id, WORK_DATE) is None


def test_unexpected_db_error_discards_photo(db, seed_users, upload_dir, monkeypatch):
    emp = seed_users["employee"]

    def rejected_commit():
        raise DataError("COMMIT", {}, Exception("value too long for column"))

    real_commit = db.commit
    monkeypatch.setattr(db, "commit", rejected_commit)
    with pytest.raises(AttendanceWriteFailed) as exc_info:
        attendance_service.check_in(
            db, emp, WORK_DATE, _at(9, 0), ShiftConfig(require_location=False), CaptureContext(photo=PHOTO)
        )
    assert exc_info.value.status_code == 500

    saved = list((upload_dir / "attendance").rglob("*")) if (upload_dir / "attendance").exists() else []
    assert [p for p in saved if p.is_file()] == []

    monkeypatch.setattr(db, "commit", real_commit)
    assert attendance_service.get_record(db, emp.user_id, WORK_DATE) is None
