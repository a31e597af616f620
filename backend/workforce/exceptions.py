"""근태 도메인 오류 정의입니다. 모든 오류는 HTTP 상태 코드와 고정된 code 값을 가집니다."""

from fastapi import HTTPException, status


class AttendanceError(HTTPException):
    code = "ATTENDANCE_ERROR"
    status_code_default = status.HTTP_400_BAD_REQUEST
    message = "근태 처리 중 오류가 발생했습니다."

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code_default, detail=detail or self.message)


# State conflicts (409)

class AlreadyCheckedIn(AttendanceError):
    code = "ALREADY_CHECKED_IN"
    status_code_default = status.HTTP_409_CONFLICT
    message = "이미 오늘 출근 처리되었습니다."


class AlreadyCheckedOut(AttendanceError):
    code = "ALREADY_CHECKED_OUT"
    status_code_default = status.HTTP_409_CONFLICT
    message = "이미 오늘 퇴근 처리되었습니다."


class NotCheckedIn(AttendanceError):
    code = "NOT_CHECKED_IN"
    status_code_default = status.HTTP_409_CONFLICT
    message = "오늘 출근 기록이 없습니다."


class BreakAlreadyOpen(AttendanceError):
    code = "BREAK_ALREADY_OPEN"
    status_code_default = status.HTTP_409_CONFLICT
    message = "이미 휴식 중입니다."


class NoOpenBreak(AttendanceError):
    code = "NO_OPEN_BREAK"
    status_code_default = status.HTTP_409_CONFLICT
    message = "진행 중인 휴식이 없습니다."


class OpenBreakPending(AttendanceError):
    code = "OPEN_BREAK_PENDING"
    status_code_default = status.HTTP_409_CONFLICT
    message = "휴식을 먼저 종료해야 퇴근할 수 있습니다."


class NotEligibleForApproval(AttendanceError):
    code = "NOT_ELIGIBLE_FOR_APPROVAL"
    status_code_default = status.HTTP_409_CONFLICT
    message = "승인 대기 상태의 퇴근 완료 기록만 처리할 수 있습니다."


class ConcurrentModification(AttendanceError):
    code = "CONCURRENT_MODIFICATION"
    status_code_default = status.HTTP_409_CONFLICT
    message = "다른 요청과 충돌했습니다. 잠시 후 다시 시도해주세요."


# Validation failures (400 / 403)

class LocationRequired(AttendanceError):
    code = "LOCATION_REQUIRED"
    message = "위치 정보가 필요합니다."


class OutsideGeofence(AttendanceError):
    code = "OUTSIDE_GEOFENCE"
    status_code_default = status.HTTP_403_FORBIDDEN
    message = "허용된 근무지 반경을 벗어났습니다."


class PhotoRequired(AttendanceError):
    code = "PHOTO_REQUIRED"
    message = "사진 촬영이 필요합니다."


class InvalidPhoto(AttendanceError):
    code = "INVALID_PHOTO"
    message = "사진 데이터를 해석할 수 없습니다."


class InvalidCoordinate(AttendanceError):
    code = "INVALID_COORDINATE"
    message = "위도는 -90~90, 경도는 -180~180 범위여야 합니다."


class CheckOutBeforeCheckIn(AttendanceError):
    code = "CHECK_OUT_BEFORE_CHECK_IN"
    message = "퇴근 시각이 출근 시각보다 빠를 수 없습니다."


class CheckOutBeforeBreakEnd(AttendanceError):
    code = "CHECK_OUT_BEFORE_BREAK_END"
    message = "퇴근 시각이 마지막 휴식 종료 시각보다 빠를 수 없습니다."


class BreakBeforeCheckIn(AttendanceError):
    code = "BREAK_BEFORE_CHECK_IN"
    message = "휴식 시작 시각이 출근 시각 또는 이전 휴식 종료 시각보다 빠를 수 없습니다."


class BreakEndBeforeStart(AttendanceError):
    code = "BREAK_END_BEFORE_START"
    message = "휴식 종료 시각이 시작 시각보다 빠를 수 없습니다."


class BreaksNotAllowed(AttendanceError):
    code = "BREAKS_NOT_ALLOWED"
    message = "회사 설정상 휴식 기록이 허용되지 않습니다."


class BreakLimitReached(AttendanceError):
    code = "BREAK_LIMIT_REACHED"
    message = "하루 최대 휴식 횟수를 초과했습니다."


class ReasonRequired(AttendanceError):
    code = "REASON_REQUIRED"
    message = "반려 사유를 입력해주세요."


class AttendanceRecordNotFound(AttendanceError):
    code = "ATTENDANCE_RECORD_NOT_FOUND"
    status_code_default = status.HTTP_404_NOT_FOUND
    message = "근태 기록을 찾을 수 없습니다."


# Infrastructure (503 / 500)

class AttendanceStoreUnavailable(AttendanceError):
    code = "ATTENDANCE_STORE_UNAVAILABLE"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "근태 저장소에 일시적으로 접근할 수 없습니다. 다시 시도해주세요."


class AttendanceWriteFailed(AttendanceError):
    code = "ATTENDANCE_WRITE_FAILED"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "근태 기록을 저장하지 못했습니다."
