"""API tests for the global device log listing and CSV export."""

from datetime import datetime, timedelta

import pytest

from labtrack.models.device_log import DeviceLog, DeviceAction

BASE = datetime(2024, 5, 10, 9, 30, 0)


@pytest.fixture
def logs(db, admin_user, engineer_user):
    entries = []
    for i in range(6):
        entries.append(DeviceLog(
            device_id=1 + i % 2,
            action=DeviceAction.deactivated if i % 3 == 0 else DeviceAction.updated,
            description=f"entry {i}",
            deactivation_reason="water damage" if i % 3 == 0 else None,
            performed_by=admin_user.id if i % 2 == 0 else engineer_user.id,
            timestamp=BASE + timedelta(hours=i),
            ip_address="172.16.0.9" if i == 5 else None,
        ))
    db.add_all(entries)
    db.commit()
    return entries


def test_requires_authentication(client) -> None:
    assert client.get("/api/device-logs/").status_code == 401
    assert client.get("/api/device-logs/export").status_code == 401


def test_faculty_can_read(client, logs, faculty_headers) -> None:
    response = client.get("/api/device-logs/", headers=faculty_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total_count"] == 6
    assert body["pagination"]["limit"] == 50
    assert [log["description"] for log in body["logs"]][:2] == ["entry 5", "entry 4"]


def test_filters_combine(client, logs, engineer_user, admin_headers) -> None:
    response = client.get(
        "/api/device-logs/",
        params={"userId": engineer_user.id, "action": "updated"},
        headers=admin_headers,
    )
    descriptions = [log["description"] for log in response.json()["logs"]]
    assert descriptions == ["entry 5", "entry 1"]


def test_date_window(client, logs, admin_headers) -> None:
    response = client.get(
        "/api/device-logs/",
        params={
            "startDate": (BASE + timedelta(hours=1)).isoformat(),
            "endDate": (BASE + timedelta(hours=3)).isoformat(),
        },
        headers=admin_headers,
    )
    assert [log["description"] for log in response.json()["logs"]] == [
        "entry 3", "entry 2", "entry 1",
    ]


def test_inverted_window_rejected(client, logs, admin_headers) -> None:
    response = client.get(
        "/api/device-logs/",
        params={"startDate": "2024-06-01T00:00:00", "endDate": "2024-05-01T00:00:00"},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_invalid_action(client, admin_headers) -> None:
    response = client.get("/api/device-logs/", params={"action": "teleported"}, headers=admin_headers)
    assert response.status_code == 400
    assert "Invalid action" in response.json()["detail"]


def test_limit_is_capped(client, logs, admin_headers) -> None:
    response = client.get("/api/device-logs/", params={"limit": 10_000}, headers=admin_headers)
    assert response.json()["pagination"]["limit"] == 200


def test_export_csv(client, logs, admin_headers) -> None:
    response = client.get(
        "/api/device-logs/export", params={"action": "deactivated"}, headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"].startswith('attachment; filename="device-logs-')
    lines = response.text.strip().splitlines()
    assert lines[0] == "Timestamp,Device,Action,Description,Deactivation Reason,Performed By,IP Address"
    assert len(lines) == 3
    assert "water damage" in lines[1]
    assert "Deleted Device" in lines[1]


def test_export_limit(client, logs, admin_headers) -> None:
    response = client.get("/api/device-logs/export", params={"limit": 2}, headers=admin_headers)
    lines = response.text.strip().splitlines()
    assert len(lines) == 3
    assert "172.16.0.9" in lines[1]
