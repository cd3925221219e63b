"""Tests for the activity recorder: descriptions, request provenance, failure capture."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from labtrack.models.device_log import DeviceLog, DeviceAction
from labtrack.services.activity_recorder import (
    RequestContext, activity_recorder, describe_action,
)
from labtrack.services.device_log_service import device_log_service


def _request(headers: dict) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "PATCH", "path": "/", "headers": raw})


class TestDescribeAction:

    @pytest.mark.parametrize("action", [
        DeviceAction.activated,
        DeviceAction.deactivated,
        DeviceAction.created,
        DeviceAction.updated,
        DeviceAction.deleted,
    ])
    def test_standard_actions(self, action) -> None:
        assert describe_action(action, "CCTV-01") == f'Device "CCTV-01" was {action.value}'

    def test_accepts_plain_string(self) -> None:
        assert describe_action("deactivated", "Printer-02") == 'Device "Printer-02" was deactivated'

    def test_reserved_action_uses_generic_wording(self) -> None:
        assert describe_action(DeviceAction.mounted, "CCTV-01") == 'Device "CCTV-01" had action: mounted'

    def test_unknown_action_uses_generic_wording(self) -> None:
        assert describe_action("rebooted", "Server-1") == 'Device "Server-1" had action: rebooted'


class TestRequestContext:

    def test_forwarded_for_wins(self) -> None:
        ctx = RequestContext.from_request(_request({
            "X-Forwarded-For": "10.0.0.1",
            "X-Real-IP": "10.0.0.2",
            "User-Agent": "pytest-agent",
        }))
        assert ctx.ip_address == "10.0.0.1"
        assert ctx.user_agent == "pytest-agent"

    def test_falls_back_to_real_ip(self) -> None:
        ctx = RequestContext.from_request(_request({"X-Real-IP": "10.0.0.2"}))
        assert ctx.ip_address == "10.0.0.2"

    def test_missing_headers_become_unknown(self) -> None:
        ctx = RequestContext.from_request(_request({}))
        assert ctx.ip_address == "unknown"
        assert ctx.user_agent == "unknown"

    def test_no_request(self) -> None:
        ctx = RequestContext.from_request(None)
        assert ctx.ip_address is None
        assert ctx.user_agent is None


class TestRecord:

    def test_appends_entry(self, db, admin) -> None:
        result = activity_recorder.record(
            db,
            device_id=7,
            device_name="CCTV-01",
            action=DeviceAction.deactivated,
            performed_by=admin.id,
            deactivation_reason="maintenance",
            old_values={"status": "active"},
            new_values={"status": "inactive"},
            context=RequestContext(ip_address="10.0.0.1", user_agent="ua"),
        )

        assert result.ok
        stored = db.query(DeviceLog).one()
        assert stored.id == result.entry.id
        assert stored.device_id == 7
        assert stored.action == DeviceAction.deactivated
        assert stored.description == 'Device "CCTV-01" was deactivated'
        assert stored.deactivation_reason == "maintenance"
        assert stored.old_values == {"status": "active"}
        assert stored.new_values == {"status": "inactive"}
        assert stored.performed_by == admin.id
        assert stored.ip_address == "10.0.0.1"
        assert stored.timestamp is not None

    def test_reason_dropped_for_other_actions(self, db, admin) -> None:
        result = activity_recorder.record(
            db,
            device_id=7,
            device_name="CCTV-01",
            action=DeviceAction.updated,
            performed_by=admin.id,
            deactivation_reason="should not be kept",
        )
        assert result.ok
        assert result.entry.deactivation_reason is None

    def test_storage_failure_is_returned_not_raised(self, db, admin) -> None:
        boom = OperationalError("INSERT", {}, Exception("database is down"))
        with patch.object(device_log_service, "append", side_effect=boom):
            result = activity_recorder.record(
                db,
                device_id=7,
                device_name="CCTV-01",
                action=DeviceAction.created,
                performed_by=admin.id,
            )

        assert not result.ok
        assert result.entry is None
        assert result.error is boom
        assert db.query(DeviceLog).count() == 0
