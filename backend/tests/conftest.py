import base64
from datetime import datetime, time, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from workforce.config import settings
from workforce.database import Base, get_db
from workforce.main import app
from workforce.models.attendance_settings import AttendanceSettings
from workforce.models.user import User
from workforce.routers.attendance import get_clock

TEST_DB_URL = "sqlite:///./test_workforce.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

COMPANY_ID = 1
OTHER_COMPANY_ID = 2
OFFICE = (25.2854, 51.5310)
PHOTO = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8\xff\xe0 fake jpeg payload").decode()


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def set(self, hour: int, minute: int, day: int = 2):
        self.now = datetime(2026, 3, day, hour, minute, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def clock():
    frozen = FrozenClock(datetime(2026, 3, 2, 8, 55, tzinfo=timezone.utc))
    app.dependency_overrides[get_clock] = lambda: frozen
    yield frozen
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(emp_id="admin001", name="Admin", company_id=COMPANY_ID, role="admin", department="HR"),
        "manager": User(emp_id="mgr001", name="Manager", company_id=COMPANY_ID, role="manager", department="Sales"),
        "employee": User(emp_id="emp001", name="Promoter", company_id=COMPANY_ID, role="employee", department="Store A"),
        "employee2": User(emp_id="emp002", name="Promoter Two", company_id=COMPANY_ID, role="employee", department="Store B"),
        "other_manager": User(emp_id="mgr901", name="Other Manager", company_id=OTHER_COMPANY_ID, role="manager"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def office_policy(db):
    row = AttendanceSettings(
        company_id=COMPANY_ID,
        default_check_in_time=time(9, 0),
        late_threshold_minutes=10,
        standard_work_hours=8.0,
        unpaid_break_minutes=0,
        require_photo=True,
        require_location=True,
        office_latitude=OFFICE[0],
        office_longitude=OFFICE[1],
        location_radius_meters=50.0,
        allow_breaks=True,
        max_breaks_per_day=0,
        timezone="UTC",
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def capture_body(**overrides) -> dict:
    body = {
        "latitude": OFFICE[0],
        "longitude": OFFICE[1],
        "accuracy": 12.5,
        "photo": PHOTO,
        "deviceInfo": {"userAgent": "pytest", "platform": "linux", "screenWidth": 390, "screenHeight": 844},
    }
    body.update(overrides)
    return body


def get_token(client, emp_id: str) -> str:
    resp = client.post("/api/auth/login", json={"emp_id": emp_id})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, emp_id: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, emp_id)}"}
