"""회사별 근태 정책(출근 기준 시각, 지오펜스, 사진 요구 등) 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Time
from sqlalchemy.sql import func
from workforce.database import Base


class AttendanceSettings(Base):
    __tablename__ = "attendance_settings"

    settings_id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, nullable=False, unique=True)
    default_check_in_time = Column(Time, nullable=False)
    late_threshold_minutes = Column(Integer, nullable=False, default=15)
    standard_work_hours = Column(Float, nullable=False, default=8.0)
    unpaid_break_minutes = Column(Integer, nullable=False, default=0)
    require_photo = Column(Boolean, nullable=False, default=True)
    require_location = Column(Boolean, nullable=False, default=True)
    office_latitude = Column(Float, nullable=True)
    office_longitude = Column(Float, nullable=True)
    location_radius_meters = Column(Float, nullable=False, default=50.0)
    allow_breaks = Column(Boolean, nullable=False, default=True)
    max_breaks_per_day = Column(Integer, nullable=False, default=0)
    timezone = Column(String(64), nullable=False, default="UTC")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
