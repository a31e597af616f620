"""근태 알림(지각, 승인/반려)과 알림 설정(유형별 ON/OFF, 빈도) 동작을 검증하는 테스트입니다."""

from datetime import date, datetime, timezone

from workforce.services import attendance_service
from workforce.utils.attendance_metrics import ShiftConfig
from tests.conftest import auth_headers

LATE_SHIFT = ShiftConfig(require_photo=False, require_location=False, grace_minutes=0)
WORK_DATE = date(2026, 3, 2)
LATE_AT = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


def _set_preference(client, headers, **overrides):
    body = {"approval_enabled": True, "late_alert_enabled": True, "frequency": "realtime"}
    body.update(overrides)
    resp = client.put("/api/notifications/preferences", json=body, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_notification_preferences_get_and_update(client, seed_users):
    headers = auth_headers(client, "emp001")

    get_resp = client.get("/api/notifications/preferences", headers=headers)
    assert get_resp.status_code == 200
    assert get_resp.json()["approval_enabled"] is True
    assert get_resp.json()["late_alert_enabled"] is True
    assert get_resp.json()["frequency"] == "realtime"

    data = _set_preference(client, headers, approval_enabled=False, frequency="daily")
    assert data["approval_enabled"] is False
    assert data["late_alert_enabled"] is True
    assert data["frequency"] == "daily"

    # 보낸 항목만 변경된다.
    partial = client.put("/api/notifications/preferences", json={"frequency": "realtime"}, headers=headers)
    assert partial.status_code == 200
    assert partial.json()["approval_enabled"] is False
    assert partial.json()["frequency"] == "realtime"

    bad = client.put(
        "/api/notifications/preferences",
        json={"approval_enabled": True, "late_alert_enabled": True, "frequency": "hourly"},
        headers=headers,
    )
    assert bad.status_code == 422


def test_late_alert_respects_preference_toggle(client, db, seed_users):
    mgr_headers = auth_headers(client, "mgr001")
    _set_preference(client, mgr_headers, late_alert_enabled=False)

    attendance_service.check_in(db, seed_users["employee"], WORK_DATE, LATE_AT, LATE_SHIFT)

    mgr_notis = client.get("/api/notifications", headers=mgr_headers).json()
    assert mgr_notis == []
    admin_notis = client.get("/api/notifications", headers=auth_headers(client, "admin001")).json()
    assert [n["noti_type"] for n in admin_notis] == ["attendance_late"]


def test_daily_frequency_merges_same_type_notifications(client, db, seed_users):
    mgr_headers = auth_headers(client, "mgr001")
    _set_preference(client, mgr_headers, frequency="daily")

    attendance_service.check_in(db, seed_users["employee"], WORK_DATE, LATE_AT, LATE_SHIFT)
    attendance_service.check_in(db, seed_users["employee2"], WORK_DATE, LATE_AT, LATE_SHIFT)

    late_items = [n for n in client.get("/api/notifications", headers=mgr_headers).json() if n["noti_type"] == "attendance_late"]
    assert len(late_items) == 1
    assert late_items[0]["title"].startswith(seed_users["employee2"].name)
    assert late_items[0]["merged_count"] == 2
    assert late_items[0]["link_url"] == f"/attendance/records/{late_items[0]['attendance_id']}"


def test_mark_read_and_read_all(client, db, seed_users):
    attendance_service.check_in(db, seed_users["employee"], WORK_DATE, LATE_AT, LATE_SHIFT)
    attendance_service.check_in(db, seed_users["employee2"], WORK_DATE, LATE_AT, LATE_SHIFT)
    headers = auth_headers(client, "mgr001")

    notis = client.get("/api/notifications", params={"unread_only": True}, headers=headers).json()
    assert len(notis) == 2

    resp = client.patch(f"/api/notifications/{notis[0]['noti_id']}/read", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["is_read"] is True
    assert len(client.get("/api/notifications", params={"unread_only": True}, headers=headers).json()) == 1

    # 다른 사용자의 알림은 읽음 처리할 수 없다.
    other = client.patch(f"/api/notifications/{notis[1]['noti_id']}/read", headers=auth_headers(client, "emp001"))
    assert other.status_code == 404

    resp = client.post("/api/notifications/read-all", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"updated": 1}
    assert client.get("/api/notifications", params={"unread_only": True}, headers=headers).json() == []
