"""직원 일자별 근태 기록과 휴식 구간 모델 정의입니다."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from workforce.database import Base


class AttendanceRecord(Base):
    __tablename__ = "employee_attendance"

    attendance_id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    company_id = Column(Integer, nullable=False)
    attendance_date = Column(Date, nullable=False)

    # timestamps are stored as naive UTC
    check_in = Column(DateTime, nullable=True)
    check_out = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=True)  # present/late/absent/half_day/leave/holiday

    # derived; recomputed on every mutation
    break_duration_minutes = Column(Integer, nullable=False, default=0)
    total_hours = Column(Float, nullable=True)
    overtime_hours = Column(Float, nullable=True)

    approval_status = Column(String(20), nullable=True)  # NULL until check-out, then pending/approved/rejected
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    location_accuracy = Column(Float, nullable=True)
    check_out_latitude = Column(Float, nullable=True)
    check_out_longitude = Column(Float, nullable=True)
    check_out_accuracy = Column(Float, nullable=True)
    location_verified = Column(Boolean, nullable=True)
    distance_from_office = Column(Float, nullable=True)

    check_in_photo = Column(String(500), nullable=True)
    check_out_photo = Column(String(500), nullable=True)

    notes = Column(Text, nullable=True)
    method = Column(String(20), nullable=False, default="web")
    ip_address = Column(String(64), nullable=True)
    device_fingerprint = Column(String(300), nullable=True)
    device_info = Column(JSON, nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    employee = relationship("User", foreign_keys=[employee_id], back_populates="attendance_records")
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    breaks = relationship(
        "AttendanceBreak",
        back_populates="record",
        order_by="AttendanceBreak.started_at",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("employee_id", "attendance_date", name="uq_employee_attendance_employee_date"),
        Index("idx_employee_attendance_company_approval", "company_id", "approval_status", "attendance_date"),
    )


class AttendanceBreak(Base):
    __tablename__ = "attendance_break"

    break_id = Column(Integer, primary_key=True, autoincrement=True)
    attendance_id = Column(Integer, ForeignKey("employee_attendance.attendance_id"), nullable=False)
    started_at = Column(DateTime, nullable=False)
    ended_at = Column(DateTime, nullable=True)

    record = relationship("AttendanceRecord", back_populates="breaks")

    __table_args__ = (
        Index("idx_attendance_break_record", "attendance_id", "started_at"),
    )
