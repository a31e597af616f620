"""회사 근태 정책 조회/수정과 정책이 출근 판정에 반영되는지 검증하는 테스트입니다."""

from scripts.init_db import ensure_default_settings
from tests.conftest import auth_headers, capture_body

POLICY = {
    "default_check_in_time": "08:30:00",
    "late_threshold_minutes": 5,
    "standard_work_hours": 7.5,
    "unpaid_break_minutes": 0,
    "require_photo": False,
    "require_location": True,
    "office_latitude": 25.2854,
    "office_longitude": 51.5310,
    "location_radius_meters": 100,
    "allow_breaks": False,
    "max_breaks_per_day": 0,
    "timezone": "Asia/Qatar",
}


def test_defaults_when_not_configured(client, seed_users):
    resp = client.get("/api/attendance/settings", headers=auth_headers(client, "emp001"))
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["is_default"] is True
    assert data["company_id"] == 1
    assert data["default_check_in_time"] == "09:00:00"
    assert data["late_threshold_minutes"] == 15
    assert data["require_photo"] is True


def test_manager_updates_policy(client, seed_users):
    headers = auth_headers(client, "mgr001")
    resp = client.put("/api/attendance/settings", json=POLICY, headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["is_default"] is False
    assert resp.json()["timezone"] == "Asia/Qatar"

    # 다른 회사에는 영향이 없다.
    other = client.get("/api/attendance/settings", headers=auth_headers(client, "mgr901")).json()
    assert other["is_default"] is True

    resp = client.put("/api/attendance/settings", json={**POLICY, "late_threshold_minutes": 20}, headers=headers)
    assert resp.json()["late_threshold_minutes"] == 20


def test_employee_cannot_update_policy(client, seed_users):
    resp = client.put("/api/attendance/settings", json=POLICY, headers=auth_headers(client, "emp001"))
    assert resp.status_code == 403


def test_invalid_policy_values(client, seed_users):
    headers = auth_headers(client, "admin001")
    assert client.put("/api/attendance/settings", json={**POLICY, "timezone": "Mars/Base"}, headers=headers).status_code == 400
    assert client.put("/api/attendance/settings", json={**POLICY, "office_longitude": None}, headers=headers).status_code == 400
    assert client.put("/api/attendance/settings", json={**POLICY, "office_latitude": 95.0}, headers=headers).status_code == 400
    assert client.put("/api/attendance/settings", json={**POLICY, "late_threshold_minutes": -1}, headers=headers).status_code == 422


def test_policy_drives_check_in(client, seed_users, clock):
    client.put("/api/attendance/settings", json=POLICY, headers=auth_headers(client, "mgr001"))
    headers = auth_headers(client, "emp001")

    # 05:40 UTC == 08:40 Asia/Qatar, 기준 08:30 + 유예 5분 초과
    clock.set(5, 40)
    resp = client.post("/api/attendance/check-in", json=capture_body(photo=None), headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "late"
    assert resp.json()["check_in_photo"] is None

    resp = client.post("/api/attendance/break", json={"action": "start"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "BREAKS_NOT_ALLOWED"


def test_init_db_stores_defaults_once(client, db, seed_users):
    assert ensure_default_settings(db, 1) is True
    assert ensure_default_settings(db, 1) is False

    data = client.get("/api/attendance/settings", headers=auth_headers(client, "emp001")).json()
    assert data["is_default"] is False
    assert data["default_check_in_time"] == "09:00:00"
    assert data["late_threshold_minutes"] == 15
    assert data["office_latitude"] is None
