"""Approval Service 도메인 서비스 레이어입니다. 퇴근 완료 근태 기록의 승인/반려/재제출을 처리합니다."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from workforce.exceptions import (
    AttendanceError,
    AttendanceRecordNotFound,
    AttendanceStoreUnavailable,
    AttendanceWriteFailed,
    NotEligibleForApproval,
    ReasonRequired,
)
from workforce.models.attendance import AttendanceRecord
from workforce.models.user import User
from workforce.services import notification_service
from workforce.utils.attendance_codes import APPROVED, NOTI_APPROVED, NOTI_REJECTED, PENDING, REJECTED
from workforce.utils.datetime_utils import to_storage, utcnow

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    attendance_id: int
    success: bool
    approval_status: Optional[str] = None
    code: Optional[str] = None
    detail: Optional[str] = None


def _unique_ids(record_ids: Iterable[int]) -> List[int]:
    return list(dict.fromkeys(int(rid) for rid in record_ids))


def _explain_ineligible(db: Session, attendance_id: int, company_id: int) -> AttendanceError:
    record = db.get(AttendanceRecord, attendance_id)
    if record is None or record.company_id != company_id:
        return AttendanceRecordNotFound()
    return NotEligibleForApproval()


def _judge_one(db: Session, attendance_id: int, reviewer: User, values: dict) -> ApprovalResult:
    target_status = values["approval_status"]
    try:
        # 적격성(pending + 퇴근 완료)은 읽은 값이 아니라 UPDATE 시점의 행 상태로 재검증한다.
        updated = (
            db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.attendance_id == attendance_id,
                AttendanceRecord.company_id == reviewer.company_id,
                AttendanceRecord.approval_status == PENDING,
                AttendanceRecord.check_out.isnot(None),
            )
            .update(
                {**values, "version": AttendanceRecord.version + 1},
                synchronize_session=False,
            )
        )
        if updated != 1:
            db.rollback()
            error = _explain_ineligible(db, attendance_id, reviewer.company_id)
            logger.info(
                "%s rejected: attendance_id=%s reviewer_id=%s code=%s",
                target_status, attendance_id, reviewer.user_id, error.code,
            )
            return ApprovalResult(attendance_id=attendance_id, success=False, code=error.code, detail=error.detail)
        db.commit()
    except OperationalError:
        db.rollback()
        logger.error("%s failed: attendance_id=%s", target_status, attendance_id, exc_info=True)
        error = AttendanceStoreUnavailable()
        return ApprovalResult(attendance_id=attendance_id, success=False, code=error.code, detail=error.detail)
    except SQLAlchemyError:
        db.rollback()
        logger.error("%s failed: attendance_id=%s", target_status, attendance_id, exc_info=True)
        error = AttendanceWriteFailed()
        return ApprovalResult(attendance_id=attendance_id, success=False, code=error.code, detail=error.detail)

    logger.info("%s: attendance_id=%s reviewer_id=%s", target_status, attendance_id, reviewer.user_id)
    return ApprovalResult(attendance_id=attendance_id, success=True, approval_status=target_status)


def approve(db: Session, record_ids: Iterable[int], reviewer: User) -> List[ApprovalResult]:
    values = {
        "approval_status": APPROVED,
        "rejection_reason": None,
        "reviewed_by": reviewer.user_id,
        "reviewed_at": to_storage(utcnow()),
    }
    results = [_judge_one(db, rid, reviewer, values) for rid in _unique_ids(record_ids)]
    _notify_outcomes(db, results, reason=None)
    return results


def reject(db: Session, record_ids: Iterable[int], reviewer: User, reason: Optional[str]) -> List[ApprovalResult]:
    reason = (reason or "").strip()
    if not reason:
        raise ReasonRequired()

    values = {
        "approval_status": REJECTED,
        "rejection_reason": reason,
        "reviewed_by": reviewer.user_id,
        "reviewed_at": to_storage(utcnow()),
    }
    results = [_judge_one(db, rid, reviewer, values) for rid in _unique_ids(record_ids)]
    _notify_outcomes(db, results, reason=reason)
    return results


def resubmit(db: Session, attendance_id: int, employee: User) -> AttendanceRecord:
    """Move the employee's own rejected record back to pending review."""
    try:
        updated = (
            db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.attendance_id == attendance_id,
                AttendanceRecord.employee_id == employee.user_id,
                AttendanceRecord.approval_status == REJECTED,
            )
            .update(
                {
                    "approval_status": PENDING,
                    "rejection_reason": None,
                    "reviewed_by": None,
                    "reviewed_at": None,
                    "version": AttendanceRecord.version + 1,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            db.rollback()
            record = db.get(AttendanceRecord, attendance_id)
            if record is None or record.employee_id != employee.user_id:
                raise AttendanceRecordNotFound()
            raise NotEligibleForApproval("반려된 기록만 재제출할 수 있습니다.")
        db.commit()
    except OperationalError:
        db.rollback()
        logger.error("resubmit failed: attendance_id=%s", attendance_id, exc_info=True)
        raise AttendanceStoreUnavailable()
    except SQLAlchemyError:
        db.rollback()
        logger.error("resubmit failed: attendance_id=%s", attendance_id, exc_info=True)
        raise AttendanceWriteFailed()

    logger.info("resubmitted: attendance_id=%s employee_id=%s", attendance_id, employee.user_id)
    record = db.get(AttendanceRecord, attendance_id)
    db.refresh(record)
    return record


def list_records_for_review(
    db: Session,
    reviewer: User,
    approval_status: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    employee_id: Optional[int] = None,
) -> List[AttendanceRecord]:
    q = db.query(AttendanceRecord).filter(AttendanceRecord.company_id == reviewer.company_id)
    if approval_status:
        q = q.filter(AttendanceRecord.approval_status == approval_status)
    if start:
        q = q.filter(AttendanceRecord.attendance_date >= start)
    if end:
        q = q.filter(AttendanceRecord.attendance_date <= end)
    if employee_id:
        q = q.filter(AttendanceRecord.employee_id == employee_id)
    return q.order_by(AttendanceRecord.attendance_date.desc(), AttendanceRecord.attendance_id.desc()).all()


def _notify_outcomes(db: Session, results: List[ApprovalResult], reason: Optional[str]) -> None:
    for result in results:
        if not result.success:
            continue
        record = db.get(AttendanceRecord, result.attendance_id)
        if record is None:
            continue
        if result.approval_status == APPROVED:
            noti_type, title, message = NOTI_APPROVED, "근태 기록이 승인되었습니다.", None
        else:
            noti_type, title, message = NOTI_REJECTED, "근태 기록이 반려되었습니다.", reason
        try:
            notification_service.notify_users(
                db,
                [record.employee_id],
                noti_type,
                f"{title} ({record.attendance_date.isoformat()})",
                message=message,
                attendance_id=record.attendance_id,
            )
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("approval notification skipped: attendance_id=%s: %s", record.attendance_id, exc)
