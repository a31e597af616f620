"""회사 근태 정책 조회/수정 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from workforce.database import get_db
from workforce.middleware.auth_middleware import get_current_user, require_reviewer
from workforce.models.user import User
from workforce.schemas.attendance_settings import AttendanceSettingsOut, AttendanceSettingsUpdate
from workforce.services import attendance_settings_service

router = APIRouter(prefix="/api/attendance/settings", tags=["attendance-settings"])


@router.get("", response_model=AttendanceSettingsOut)
def get_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return attendance_settings_service.describe_settings(db, current_user.company_id)


@router.put("", response_model=AttendanceSettingsOut)
def update_settings(
    data: AttendanceSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_reviewer),
):
    attendance_settings_service.upsert_settings(db, current_user.company_id, data.model_dump())
    return attendance_settings_service.describe_settings(db, current_user.company_id)
