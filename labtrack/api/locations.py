"""Locations (labs) API router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from labtrack.core.exceptions import ResourceConflictError, ResourceNotFoundError
from labtrack.core.security import Actor, get_current_actor, require_admin
from labtrack.db.session import get_db
from labtrack.models.device import Device
from labtrack.models.location import Location
from labtrack.models.school import School
from labtrack.schemas.schemas import LocationIn, LocationOut, MessageResponse

router = APIRouter(prefix="/locations", tags=["locations"])


def _get_location(db: Session, location_id: int) -> Location:
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location:
        raise ResourceNotFoundError("Location not found")
    return location


def _check_school(db: Session, school_id: int) -> None:
    if not db.query(School).filter(School.id == school_id).first():
        raise ResourceNotFoundError("School not found")


@router.get("/", response_model=List[LocationOut])
async def list_locations(
    school_id: Optional[int] = Query(None, alias="schoolId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    query = db.query(Location)
    if school_id is not None:
        query = query.filter(Location.school_id == school_id)
    return query.order_by(Location.name).all()


@router.get("/{location_id}", response_model=LocationOut)
async def get_location(location_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return _get_location(db, location_id)


@router.post("/", response_model=LocationOut, status_code=201)
async def create_location(body: LocationIn, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    _check_school(db, body.school_id)
    location = Location(**body.model_dump())
    db.add(location)
    db.commit()
    db.refresh(location)
    return location


@router.put("/{location_id}", response_model=LocationOut)
async def update_location(
    location_id: int,
    body: LocationIn,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    location = _get_location(db, location_id)
    _check_school(db, body.school_id)
    for key, value in body.model_dump().items():
        setattr(location, key, value)
    db.commit()
    db.refresh(location)
    return location


@router.delete("/{location_id}", response_model=MessageResponse)
async def delete_location(location_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    """Delete a location with no devices in it."""
    location = _get_location(db, location_id)
    if db.query(Device).filter(Device.location_id == location_id).count():
        raise ResourceConflictError("Location still has devices")
    db.delete(location)
    db.commit()
    return MessageResponse(message="Location deleted")
