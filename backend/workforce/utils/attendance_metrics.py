"""근무 시간, 휴식 시간, 초과 근무, 지각 여부 계산 유틸리티입니다.

모든 함수는 순수 함수이며 저장된 타임스탬프로부터 파생 값을 다시 계산합니다.
반올림은 표시 단계(round_hours/format_hours)에서만 수행합니다.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Iterable, Optional, Tuple

from workforce.utils.attendance_codes import LATE, PRESENT
from workforce.utils.datetime_utils import ensure_utc, to_local
from workforce.utils.geo import GeofenceTarget


@dataclass(frozen=True)
class ShiftConfig:
    expected_start: time = time(9, 0)
    grace_minutes: int = 15
    standard_shift_hours: float = 8.0
    unpaid_break_minutes: int = 0
    require_photo: bool = True
    require_location: bool = True
    geofence: Optional[GeofenceTarget] = None
    allow_breaks: bool = True
    max_breaks_per_day: int = 0
    timezone: str = "UTC"

    @property
    def geofence_required(self) -> bool:
        return self.require_location and self.geofence is not None


def minutes_between(start: datetime, end: datetime) -> int:
    delta = ensure_utc(end) - ensure_utc(start)
    return int(delta.total_seconds() // 60)


def break_duration_minutes(breaks: Iterable[Tuple[datetime, Optional[datetime]]]) -> int:
    total = 0
    for started_at, ended_at in breaks:
        if ended_at is None:
            continue
        total += minutes_between(started_at, ended_at)
    return total


def total_hours(
    check_in: datetime,
    check_out: datetime,
    break_minutes: int,
    unpaid_break_minutes: int = 0,
) -> float:
    worked = minutes_between(check_in, check_out)
    net = max(0, worked - break_minutes - unpaid_break_minutes)
    return net / 60.0


def overtime_hours(hours: float, standard_shift_hours: float) -> float:
    return max(0.0, hours - standard_shift_hours)


def classify_check_in(timestamp: datetime, shift: ShiftConfig) -> str:
    local = to_local(timestamp, shift.timezone)
    threshold = datetime.combine(local.date(), shift.expected_start, tzinfo=local.tzinfo)
    threshold += timedelta(minutes=shift.grace_minutes)
    return LATE if local > threshold else PRESENT


def round_hours(hours: Optional[float]) -> Optional[float]:
    if hours is None:
        return None
    return round(hours, 2)


def format_hours(hours: Optional[float]) -> Optional[str]:
    if hours is None:
        return None
    total_minutes = int(round(hours * 60))
    return f"{total_minutes // 60}h {total_minutes % 60}m"
