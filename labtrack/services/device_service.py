"""Device service — CRUD plus the active/inactive status state machine.

Only admins and engineers may mutate devices. Every committed status change,
and every update touching name, type or location, is handed to the activity
recorder. A same-status "transition" succeeds without producing a log entry.

Concurrent writers are not serialised: the read of the current state used for
diffing and the write of the new state are separate steps, and the last write
wins.
"""

import logging
from typing import Optional, List, Union

from sqlalchemy.orm import Session

from labtrack.core.exceptions import AuthorizationError, ResourceNotFoundError, ValidationError
from labtrack.core.security import Actor
from labtrack.models.device import Device, DeviceStatus
from labtrack.models.device_log import DeviceAction
from labtrack.models.location import Location
from labtrack.models.school import School
from labtrack.models.user import UserRole
from labtrack.schemas.schemas import DeviceCreate, DeviceUpdate
from labtrack.services.activity_recorder import RequestContext, activity_recorder

logger = logging.getLogger("labtrack.devices")

DEVICE_MANAGERS = frozenset({UserRole.admin, UserRole.engineer})

# Changes to these snapshot keys produce an "updated" entry
_TRACKED_FIELDS = ("name", "device_type", "location")


class DeviceService:
    """Manages devices and their status transitions."""

    @staticmethod
    def authorize(actor: Actor) -> None:
        if actor.role not in DEVICE_MANAGERS:
            raise AuthorizationError("Forbidden - Only admins and engineers can modify devices")

    @staticmethod
    def coerce_status(value: Union[DeviceStatus, str]) -> DeviceStatus:
        try:
            return DeviceStatus(value)
        except ValueError:
            raise ValidationError("Invalid status. Must be active or inactive.")

    @staticmethod
    def require_reason(reason: Optional[str]) -> str:
        if reason is None or not reason.strip():
            raise ValidationError("Deactivation reason is required when deactivating a device.")
        return reason.strip()

    @staticmethod
    def get_device(db: Session, device_id: int) -> Device:
        """Get a device by id."""
        device = db.query(Device).filter(Device.id == device_id).first()
        if not device:
            raise ResourceNotFoundError("Device not found")
        return device

    @staticmethod
    def list_devices(
        db: Session,
        location_id: Optional[int] = None,
        school_id: Optional[int] = None,
    ) -> List[Device]:
        """List devices, narrowed to a location or, failing that, a school."""
        query = db.query(Device)
        if location_id is not None:
            query = query.filter(Device.location_id == location_id)
        elif school_id is not None:
            query = query.filter(Device.school_id == school_id)
        return query.order_by(Device.id).all()

    @staticmethod
    def _check_placement(db: Session, location_id: int, school_id: int) -> None:
        location = db.query(Location).filter(Location.id == location_id).first()
        if not location:
            raise ResourceNotFoundError("Location not found")
        school = db.query(School).filter(School.id == school_id).first()
        if not school:
            raise ResourceNotFoundError("School not found")
        if location.school_id != school.id:
            raise ValidationError("Location does not belong to the given school")

    @staticmethod
    def _status_action(status: DeviceStatus) -> DeviceAction:
        return DeviceAction.activated if status == DeviceStatus.active else DeviceAction.deactivated

    @staticmethod
    def update_status(
        db: Session,
        device_id: int,
        new_status: Union[DeviceStatus, str],
        reason: Optional[str],
        actor: Actor,
        context: Optional[RequestContext] = None,
    ) -> Device:
        """Move a device between active and inactive.

        Raises:
            AuthorizationError: actor is not an admin or engineer.
            ValidationError: unknown status, or deactivating without a reason.
            ResourceNotFoundError: no such device.
        """
        DeviceService.authorize(actor)
        status = DeviceService.coerce_status(new_status)
        device = DeviceService.get_device(db, device_id)

        old_status = device.status
        if old_status == status:
            logger.debug("Device %s already %s, nothing to log", device_id, status.value)
            return device
        if status == DeviceStatus.inactive:
            reason = DeviceService.require_reason(reason)

        device.status = status
        db.commit()
        db.refresh(device)

        action = DeviceService._status_action(status)
        activity_recorder.record(
            db,
            device_id=device.id,
            device_name=device.name,
            action=action,
            performed_by=actor.id,
            deactivation_reason=reason if action == DeviceAction.deactivated else None,
            old_values={"status": old_status.value},
            new_values={"status": status.value},
            context=context,
        )
        return device

    @staticmethod
    def create_device(
        db: Session,
        fields: DeviceCreate,
        actor: Actor,
        context: Optional[RequestContext] = None,
    ) -> Device:
        """Create a device and log it as "created"."""
        DeviceService.authorize(actor)
        DeviceService._check_placement(db, fields.location_id, fields.school_id)

        device = Device(
            name=fields.name,
            device_type=fields.device_type,
            status=fields.status,
            location_id=fields.location_id,
            school_id=fields.school_id,
            serial_number=fields.serial_number,
            purchase_date=fields.purchase_date,
            warranty_expiry=fields.warranty_expiry,
        )
        db.add(device)
        db.commit()
        db.refresh(device)

        activity_recorder.record(
            db,
            device_id=device.id,
            device_name=device.name,
            action=DeviceAction.created,
            performed_by=actor.id,
            new_values=device.snapshot(),
            context=context,
        )
        return device

    @staticmethod
    def update_device(
        db: Session,
        device_id: int,
        fields: DeviceUpdate,
        actor: Actor,
        context: Optional[RequestContext] = None,
    ) -> Device:
        """Replace a device's fields.

        Produces up to two log entries: one for a status change and one for a
        change of name, type or location.
        """
        DeviceService.authorize(actor)
        device = DeviceService.get_device(db, device_id)
        DeviceService._check_placement(db, fields.location_id, fields.school_id)

        old_values = device.snapshot()
        old_status = device.status
        new_status = fields.status if fields.status is not None else old_status
        reason = None
        if new_status != old_status and new_status == DeviceStatus.inactive:
            reason = DeviceService.require_reason(fields.deactivation_reason)

        device.name = fields.name
        device.device_type = fields.device_type
        device.location_id = fields.location_id
        device.school_id = fields.school_id
        device.status = new_status
        for optional in ("serial_number", "purchase_date", "warranty_expiry"):
            if optional in fields.model_fields_set:
                setattr(device, optional, getattr(fields, optional))
        db.commit()
        db.refresh(device)

        new_values = device.snapshot()
        name = device.name

        if new_status != old_status:
            action = DeviceService._status_action(new_status)
            activity_recorder.record(
                db,
                device_id=device_id,
                device_name=name,
                action=action,
                performed_by=actor.id,
                deactivation_reason=reason,
                old_values=old_values,
                new_values=new_values,
                context=context,
            )

        if any(old_values[key] != new_values[key] for key in _TRACKED_FIELDS):
            activity_recorder.record(
                db,
                device_id=device_id,
                device_name=name,
                action=DeviceAction.updated,
                performed_by=actor.id,
                old_values=old_values,
                new_values=new_values,
                context=context,
            )
        return device

    @staticmethod
    def delete_device(
        db: Session,
        device_id: int,
        actor: Actor,
        context: Optional[RequestContext] = None,
    ) -> None:
        """Delete a device; its log entries are kept and later shown as "Deleted Device"."""
        DeviceService.authorize(actor)
        device = DeviceService.get_device(db, device_id)
        old_values = device.snapshot()
        name = device.name

        db.delete(device)
        db.commit()

        activity_recorder.record(
            db,
            device_id=device_id,
            device_name=name,
            action=DeviceAction.deleted,
            performed_by=actor.id,
            old_values=old_values,
            context=context,
        )


device_service = DeviceService()
