"""Seed the database with a demo company, its users and attendance policy."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import time
from workforce.database import SessionLocal, engine, Base
import workforce.models  # noqa: F401

from workforce.models.user import User
from workforce.models.attendance_settings import AttendanceSettings

DEMO_COMPANY_ID = 1


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        users = [
            User(emp_id="admin001", name="관리자 김철수", company_id=DEMO_COMPANY_ID, department="HR팀", role="admin", email="admin@company.com"),
            User(emp_id="mgr001", name="매니저 이영희", company_id=DEMO_COMPANY_ID, department="영업팀", role="manager", email="manager1@company.com"),
            User(emp_id="emp001", name="프로모터 정수연", company_id=DEMO_COMPANY_ID, department="매장A", role="employee", email="emp1@company.com"),
            User(emp_id="emp002", name="프로모터 최동현", company_id=DEMO_COMPANY_ID, department="매장B", role="employee", email="emp2@company.com"),
        ]
        db.add_all(users)

        db.add(AttendanceSettings(
            company_id=DEMO_COMPANY_ID,
            default_check_in_time=time(9, 0),
            late_threshold_minutes=10,
            standard_work_hours=8.0,
            unpaid_break_minutes=0,
            require_photo=True,
            require_location=True,
            office_latitude=37.5665,
            office_longitude=126.9780,
            location_radius_meters=100.0,
            allow_breaks=True,
            max_breaks_per_day=3,
            timezone="Asia/Seoul",
        ))

        db.commit()
        print(f"Seeded {len(users)} users and attendance settings for company {DEMO_COMPANY_ID}.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
