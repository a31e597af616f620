"""근태 상태/승인 상태/일일 진행 단계 코드 상수입니다."""

# AttendanceRecord.status
PRESENT = "present"
LATE = "late"
ABSENT = "absent"
HALF_DAY = "half_day"
LEAVE = "leave"
HOLIDAY = "holiday"

ATTENDANCE_STATUSES = (PRESENT, LATE, ABSENT, HALF_DAY, LEAVE, HOLIDAY)
WORKED_STATUSES = (PRESENT, LATE)

# AttendanceRecord.approval_status
PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

APPROVAL_STATUSES = (PENDING, APPROVED, REJECTED)

# 하루 근태 진행 단계 (저장하지 않고 기록에서 유도)
NOT_STARTED = "not_started"
CHECKED_IN = "checked_in"
ON_BREAK = "on_break"
CHECKED_OUT = "checked_out"

# Notification.noti_type
NOTI_LATE = "attendance_late"
NOTI_APPROVED = "attendance_approved"
NOTI_REJECTED = "attendance_rejected"
