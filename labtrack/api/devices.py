"""Devices API router — CRUD, status transitions, per-device activity logs."""

from datetime import datetime
from typing import Optional, List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from labtrack.core.config import Settings
from labtrack.core.security import Actor, get_current_actor, get_settings
from labtrack.db.session import get_db
from labtrack.schemas.schemas import (
    DeviceCreate, DeviceUpdate, DeviceStatusUpdate, DeviceOut,
    DeviceLogFilter, DeviceLogPage, MessageResponse,
)
from labtrack.services.activity_recorder import RequestContext
from labtrack.services.device_log_service import device_log_service
from labtrack.services.device_service import device_service

router = APIRouter(prefix="/devices", tags=["devices"])


@router.get("/", response_model=List[DeviceOut])
async def list_devices(
    location_id: Optional[int] = Query(None, alias="locationId"),
    school_id: Optional[int] = Query(None, alias="schoolId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """List devices, optionally for one location or school."""
    devices = device_service.list_devices(db, location_id, school_id)
    return [DeviceOut.from_device(d) for d in devices]


@router.post("/", response_model=DeviceOut, status_code=201)
async def create_device(
    body: DeviceCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Create a device (admin / engineer)."""
    device = device_service.create_device(db, body, actor, RequestContext.from_request(request))
    return DeviceOut.from_device(device)


@router.get("/{device_id}", response_model=DeviceOut)
async def get_device(
    device_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Get a single device."""
    return DeviceOut.from_device(device_service.get_device(db, device_id))


@router.patch("/{device_id}", response_model=DeviceOut)
async def update_device_status(
    device_id: int,
    body: DeviceStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Activate or deactivate a device. Deactivation requires a reason."""
    device = device_service.update_status(
        db, device_id, body.status, body.deactivation_reason, actor,
        RequestContext.from_request(request),
    )
    return DeviceOut.from_device(device)


@router.put("/{device_id}", response_model=DeviceOut)
async def update_device(
    device_id: int,
    body: DeviceUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Replace a device's fields (admin / engineer)."""
    device = device_service.update_device(
        db, device_id, body, actor, RequestContext.from_request(request),
    )
    return DeviceOut.from_device(device)


@router.delete("/{device_id}", response_model=MessageResponse)
async def delete_device(
    device_id: int,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Delete a device (admin / engineer). Its history is kept."""
    device_service.delete_device(db, device_id, actor, RequestContext.from_request(request))
    return MessageResponse(message="Device deleted successfully")


@router.get("/{device_id}/logs", response_model=DeviceLogPage)
async def list_logs_for_device(
    device_id: int,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    action: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    settings: Settings = Depends(get_settings),
):
    """Activity history of one device, most recent first."""
    log_filter = DeviceLogFilter.from_query(
        action=action, device_id=device_id, start_date=start_date, end_date=end_date,
    )
    page_size = min(limit or settings.DEVICE_LOG_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return device_log_service.query(db, log_filter, page, page_size)
