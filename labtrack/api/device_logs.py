"""Device logs API router — global activity log and CSV export."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from labtrack.core.config import Settings
from labtrack.core.security import Actor, get_current_actor, get_settings
from labtrack.db.base import utcnow
from labtrack.db.session import get_db
from labtrack.schemas.schemas import DeviceLogFilter, DeviceLogPage
from labtrack.services.device_log_service import device_log_service

router = APIRouter(prefix="/device-logs", tags=["device-logs"])


@router.get("/", response_model=DeviceLogPage)
async def list_device_logs(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    action: Optional[str] = Query(None),
    device_id: Optional[int] = Query(None, alias="deviceId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    settings: Settings = Depends(get_settings),
):
    """Query device activity logs, most recent first."""
    log_filter = DeviceLogFilter.from_query(
        action=action,
        device_id=device_id,
        performed_by=user_id,
        start_date=start_date,
        end_date=end_date,
    )
    page_size = min(limit or settings.LOG_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return device_log_service.query(db, log_filter, page, page_size)


@router.get("/export")
async def export_device_logs(
    limit: Optional[int] = Query(None, ge=1),
    action: Optional[str] = Query(None),
    device_id: Optional[int] = Query(None, alias="deviceId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    settings: Settings = Depends(get_settings),
):
    """Export matching logs as CSV."""
    log_filter = DeviceLogFilter.from_query(
        action=action,
        device_id=device_id,
        performed_by=user_id,
        start_date=start_date,
        end_date=end_date,
    )
    max_rows = min(limit or settings.EXPORT_DEFAULT_ROWS, settings.EXPORT_MAX_ROWS)
    content = device_log_service.export_csv(db, log_filter, max_rows)
    filename = f"device-logs-{utcnow().date().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
