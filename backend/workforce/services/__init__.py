"""서비스 레이어 패키지 초기화 모듈입니다."""

from workforce.services import (
    auth_service,
    notification_service,
    attendance_settings_service,
    attendance_service,
    approval_service,
    attendance_summary_service,
)
