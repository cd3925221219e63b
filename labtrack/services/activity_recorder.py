"""Activity recorder — turns device mutations into device log entries.

Recording is best-effort: the primary mutation has already been committed by
the time ``record`` runs, and a failure here is returned as a
``RecordResult`` instead of being raised, so callers never lose a successful
device change because the log write failed.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, Union

from fastapi import Request
from sqlalchemy.orm import Session

from labtrack.models.device_log import DeviceLog, DeviceAction
from labtrack.services.device_log_service import device_log_service

logger = logging.getLogger("labtrack.activity")

UNKNOWN = "unknown"

_STANDARD_ACTIONS = frozenset({
    DeviceAction.activated,
    DeviceAction.deactivated,
    DeviceAction.created,
    DeviceAction.updated,
    DeviceAction.deleted,
})


@dataclass(frozen=True)
class RequestContext:
    """Network provenance captured alongside a log entry."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @classmethod
    def from_request(cls, request: Optional[Request]) -> "RequestContext":
        if request is None:
            return cls()
        headers = request.headers
        ip = headers.get("x-forwarded-for") or headers.get("x-real-ip") or UNKNOWN
        ua = headers.get("user-agent") or UNKNOWN
        return cls(ip_address=ip[:255], user_agent=ua[:500])


@dataclass(frozen=True)
class RecordResult:
    entry: Optional[DeviceLog] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.entry is not None


def describe_action(action: Union[DeviceAction, str], device_name: str) -> str:
    """Human-readable description of an action on a named device."""
    try:
        action = DeviceAction(action)
    except ValueError:
        return f'Device "{device_name}" had action: {action}'
    if action in _STANDARD_ACTIONS:
        return f'Device "{device_name}" was {action.value}'
    return f'Device "{device_name}" had action: {action.value}'


class ActivityRecorder:
    """Writes one device log entry per recognised device mutation."""

    @staticmethod
    def record(
        db: Session,
        device_id: int,
        device_name: str,
        action: DeviceAction,
        performed_by: int,
        deactivation_reason: Optional[str] = None,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        context: Optional[RequestContext] = None,
    ) -> RecordResult:
        """Append a log entry; never raises."""
        context = context or RequestContext()
        try:
            entry = DeviceLog(
                device_id=device_id,
                action=action,
                description=describe_action(action, device_name),
                deactivation_reason=deactivation_reason if action == DeviceAction.deactivated else None,
                old_values=old_values,
                new_values=new_values,
                performed_by=performed_by,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
            )
            entry = device_log_service.append(db, entry)
        except Exception as exc:
            logger.error(
                "Failed to log %s for device %s by user %s: %s",
                action.value, device_id, performed_by, exc,
                exc_info=True,
            )
            try:
                db.rollback()
            except Exception:
                logger.exception("Rollback after failed device log write also failed")
            return RecordResult(error=exc)

        logger.info(
            "Device activity logged: %s for device %s by user %s",
            action.value, device_id, performed_by,
        )
        return RecordResult(entry=entry)


activity_recorder = ActivityRecorder()
