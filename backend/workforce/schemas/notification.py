"""근태 알림 및 수신 설정 요청/응답 스키마입니다."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, computed_field, field_validator

from workforce.utils.datetime_utils import ensure_utc


class NotificationOut(BaseModel):
    noti_id: int
    noti_type: str
    attendance_id: Optional[int] = None
    title: str
    message: Optional[str] = None
    is_read: bool
    merged_count: int = 1
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value):
        return ensure_utc(value)

    @computed_field
    @property
    def link_url(self) -> Optional[str]:
        if self.attendance_id is None:
            return None
        return f"/attendance/records/{self.attendance_id}"


class NotificationPreferenceOut(BaseModel):
    approval_enabled: bool
    late_alert_enabled: bool
    frequency: Literal["realtime", "daily"]

    model_config = {"from_attributes": True}


class NotificationPreferenceUpdate(BaseModel):
    approval_enabled: Optional[bool] = None
    late_alert_enabled: Optional[bool] = None
    frequency: Optional[Literal["realtime", "daily"]] = None


class MarkAllReadOut(BaseModel):
    updated: int
