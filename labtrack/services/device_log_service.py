"""Device log store — append-only writes and filtered, paginated reads."""

import csv
import io
import math
from typing import List, Dict, Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from labtrack.core.exceptions import StorageError, ValidationError
from labtrack.models.device import Device
from labtrack.models.device_log import DeviceLog
from labtrack.models.location import Location
from labtrack.models.user import User
from labtrack.schemas.schemas import (
    ActorRef, DeviceLogFilter, DeviceLogOut, DeviceLogPage, DeviceRef, Pagination,
)

DELETED_DEVICE = DeviceRef(id="deleted", name="Deleted Device", device_type="unknown")
UNKNOWN_USER = ActorRef(
    id="unknown", username="Unknown User", email="unknown@example.com", role="unknown",
)
DELETED_LOCATION = "Deleted Location"
NOT_AVAILABLE = "N/A"

EXPORT_COLUMNS = [
    "Timestamp", "Device", "Action", "Description",
    "Deactivation Reason", "Performed By", "IP Address",
]


class DeviceLogService:
    """Records and queries device activity logs."""

    @staticmethod
    def append(db: Session, entry: DeviceLog) -> DeviceLog:
        """Insert a single log entry and commit it.

        There is no update or delete counterpart.
        """
        try:
            db.add(entry)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(f"Could not append device log: {exc}") from exc
        db.refresh(entry)
        return entry

    @staticmethod
    def _filtered(db: Session, log_filter: DeviceLogFilter):
        query = db.query(DeviceLog)

        if log_filter.action is not None:
            query = query.filter(DeviceLog.action == log_filter.action)
        if log_filter.device_id is not None:
            query = query.filter(DeviceLog.device_id == log_filter.device_id)
        if log_filter.performed_by is not None:
            query = query.filter(DeviceLog.performed_by == log_filter.performed_by)
        if log_filter.start_date is not None:
            query = query.filter(DeviceLog.timestamp >= log_filter.start_date)
        if log_filter.end_date is not None:
            query = query.filter(DeviceLog.timestamp <= log_filter.end_date)

        # Most recent first; id breaks ties between identical timestamps
        return query.order_by(DeviceLog.timestamp.desc(), DeviceLog.id.desc())

    @staticmethod
    def query(
        db: Session,
        log_filter: DeviceLogFilter,
        page: int = 1,
        page_size: int = 50,
    ) -> DeviceLogPage:
        """Query device logs with filters and pagination."""
        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if page_size < 1:
            raise ValidationError("limit must be 1 or greater")
        log_filter.check()

        query = DeviceLogService._filtered(db, log_filter)
        total = query.order_by(None).count()
        offset = (page - 1) * page_size
        logs = query.offset(offset).limit(page_size).all()

        return DeviceLogPage(
            logs=DeviceLogService.resolve(db, logs),
            pagination=Pagination(
                page=page,
                limit=page_size,
                total_count=total,
                total_pages=math.ceil(total / page_size),
                has_next=offset + page_size < total,
                has_prev=page > 1,
            ),
        )

    @staticmethod
    def _location_ids(logs: List[DeviceLog]) -> set:
        ids = set()
        for log in logs:
            for values in (log.old_values, log.new_values):
                if values and isinstance(values.get("location"), int):
                    ids.add(values["location"])
        return ids

    @staticmethod
    def _with_location_names(values: Optional[Dict[str, Any]], names: Dict[int, str]) -> Optional[Dict[str, Any]]:
        """Replace a snapshot's raw location id with ``{"id", "name"}``."""
        if not values or not isinstance(values.get("location"), int):
            return values
        location_id = values["location"]
        return {
            **values,
            "location": {"id": location_id, "name": names.get(location_id, DELETED_LOCATION)},
        }

    @staticmethod
    def resolve(db: Session, logs: List[DeviceLog]) -> List[DeviceLogOut]:
        """Attach device, actor and location display fields, with placeholders for dangling references."""
        device_ids = {log.device_id for log in logs}
        user_ids = {log.performed_by for log in logs}
        devices = (
            {d.id: d for d in db.query(Device).filter(Device.id.in_(device_ids)).all()}
            if device_ids else {}
        )
        users = (
            {u.id: u for u in db.query(User).filter(User.id.in_(user_ids)).all()}
            if user_ids else {}
        )
        location_ids = DeviceLogService._location_ids(logs)
        location_names = (
            {loc.id: loc.name for loc in db.query(Location).filter(Location.id.in_(location_ids)).all()}
            if location_ids else {}
        )

        resolved = []
        for log in logs:
            device = devices.get(log.device_id)
            user = users.get(log.performed_by)
            resolved.append(DeviceLogOut(
                id=log.id,
                device=DeviceRef(
                    id=str(device.id), name=device.name, device_type=device.device_type.value,
                ) if device else DELETED_DEVICE,
                action=log.action,
                description=log.description,
                deactivation_reason=log.deactivation_reason,
                old_values=DeviceLogService._with_location_names(log.old_values, location_names),
                new_values=DeviceLogService._with_location_names(log.new_values, location_names),
                performed_by=ActorRef(
                    id=str(user.id), username=user.name, email=user.email, role=user.role.value,
                ) if user else UNKNOWN_USER,
                timestamp=log.timestamp,
                ip_address=log.ip_address,
                user_agent=log.user_agent,
            ))
        return resolved

    @staticmethod
    def export_rows(db: Session, log_filter: DeviceLogFilter, limit: int) -> List[Dict[str, Any]]:
        """Flatten up to ``limit`` matching entries into export rows, most recent first."""
        if limit < 1:
            raise ValidationError("limit must be 1 or greater")
        log_filter.check()

        logs = DeviceLogService._filtered(db, log_filter).limit(limit).all()
        rows = []
        for log in DeviceLogService.resolve(db, logs):
            rows.append({
                "Timestamp": log.timestamp.isoformat(),
                "Device": log.device.name,
                "Action": log.action.value,
                "Description": log.description,
                "Deactivation Reason": log.deactivation_reason or NOT_AVAILABLE,
                "Performed By": log.performed_by.username,
                "IP Address": log.ip_address or NOT_AVAILABLE,
            })
        return rows

    @staticmethod
    def export_csv(db: Session, log_filter: DeviceLogFilter, limit: int) -> str:
        """Render ``export_rows`` as CSV text with a header line."""
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        writer.writerows(DeviceLogService.export_rows(db, log_filter, limit))
        return buffer.getvalue()


device_log_service = DeviceLogService()
