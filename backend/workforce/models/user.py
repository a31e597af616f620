"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from workforce.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    emp_id = Column(String(20), unique=True, nullable=False)
    name = Column(String(50), nullable=False)
    company_id = Column(Integer, nullable=False)
    department = Column(String(100))
    role = Column(String(20), nullable=False)  # admin/manager/employee
    email = Column(String(100))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    attendance_records = relationship(
        "AttendanceRecord",
        foreign_keys="AttendanceRecord.employee_id",
        back_populates="employee",
    )
    notifications = relationship("Notification", back_populates="user")
    notification_preference = relationship("NotificationPreference", back_populates="user", uselist=False)

    __table_args__ = (
        Index("idx_users_company_role", "company_id", "role"),
    )
