"""Attendance Summary Service 도메인 서비스 레이어입니다. 근태 기록을 월별 통계로 집계합니다."""

import calendar
from datetime import date, datetime
from typing import Iterable, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from workforce.models.attendance import AttendanceRecord
from workforce.models.user import User
from workforce.utils.attendance_codes import ABSENT, LATE, PENDING, WORKED_STATUSES


def parse_month(month: str) -> tuple[date, date]:
    try:
        first = datetime.strptime(month.strip(), "%Y-%m").date()
    except (AttributeError, ValueError):
        raise HTTPException(status_code=400, detail="month는 YYYY-MM 형식이어야 합니다.")
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def summarize(records: Iterable[AttendanceRecord]) -> dict:
    records = list(records)
    present_days = sum(1 for r in records if r.status in WORKED_STATUSES)
    total_hours = sum(r.total_hours or 0.0 for r in records)
    overtime_hours = sum(r.overtime_hours or 0.0 for r in records)
    return {
        "total_days": len(records),
        "present_days": present_days,
        "late_days": sum(1 for r in records if r.status == LATE),
        "absent_days": sum(1 for r in records if r.status == ABSENT),
        "total_hours": total_hours,
        "average_hours": total_hours / present_days if present_days else 0.0,
        "overtime_hours": overtime_hours,
        "pending_approvals": sum(1 for r in records if r.approval_status == PENDING),
    }


def list_employee_records(db: Session, employee_id: int, start: date, end: date) -> List[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.employee_id == employee_id,
            AttendanceRecord.attendance_date >= start,
            AttendanceRecord.attendance_date <= end,
        )
        .order_by(AttendanceRecord.attendance_date.desc())
        .all()
    )


def get_monthly_attendance(db: Session, employee: User, month: str) -> dict:
    start, end = parse_month(month)
    records = list_employee_records(db, employee.user_id, start, end)
    return {
        "month": start.strftime("%Y-%m"),
        "attendance": records,
        "summary": summarize(records),
    }
