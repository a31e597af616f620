"""Datetime 관련 공용 유틸리티 헬퍼입니다."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware (UTC). Naive values are assumed to be UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_storage(dt: datetime | None) -> datetime | None:
    # DB 컬럼은 naive UTC로 저장한다.
    if dt is None:
        return None
    return ensure_utc(dt).replace(tzinfo=None)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_local(dt: datetime, tz_name: str) -> datetime:
    return ensure_utc(dt).astimezone(ZoneInfo(tz_name))


def local_date(dt: datetime, tz_name: str) -> date:
    return to_local(dt, tz_name).date()
