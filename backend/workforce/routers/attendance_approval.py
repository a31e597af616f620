"""근태 승인/반려 API 라우터입니다. 관리자(manager/admin)만 접근할 수 있습니다."""

from dataclasses import asdict
from datetime import date
from typing import List, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from workforce.database import get_db
from workforce.middleware.auth_middleware import require_reviewer
from workforce.models.user import User
from workforce.schemas.attendance import ApprovalRequest, ApprovalResponse, AttendanceRecordOut
from workforce.services import approval_service

router = APIRouter(prefix="/api/attendance", tags=["attendance-approval"])


@router.get("/records", response_model=List[AttendanceRecordOut])
def list_records(
    approval_status: Literal["pending", "approved", "rejected"] | None = Query(None),
    start: date | None = Query(None),
    end: date | None = Query(None),
    employee_id: int | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_reviewer),
):
    return approval_service.list_records_for_review(
        db,
        current_user,
        approval_status=approval_status,
        start=start,
        end=end,
        employee_id=employee_id,
    )


@router.post("/approve", response_model=ApprovalResponse)
def approve_or_reject(
    data: ApprovalRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_reviewer),
):
    if data.action == "approve":
        results = approval_service.approve(db, data.attendance_ids, current_user)
    else:
        results = approval_service.reject(db, data.attendance_ids, current_user, data.rejection_reason)
    succeeded = sum(1 for r in results if r.success)
    return {
        "results": [asdict(r) for r in results],
        "succeeded": succeeded,
        "failed": len(results) - succeeded,
    }
