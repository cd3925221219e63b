"""Schools API router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from labtrack.core.exceptions import ResourceConflictError, ResourceNotFoundError
from labtrack.core.security import Actor, get_current_actor, require_admin
from labtrack.db.session import get_db
from labtrack.models.location import Location
from labtrack.models.region import Region
from labtrack.models.school import School
from labtrack.schemas.schemas import SchoolIn, SchoolOut, MessageResponse

router = APIRouter(prefix="/schools", tags=["schools"])


def _get_school(db: Session, school_id: int) -> School:
    school = db.query(School).filter(School.id == school_id).first()
    if not school:
        raise ResourceNotFoundError("School not found")
    return school


def _check_region(db: Session, region_id: int) -> None:
    if not db.query(Region).filter(Region.id == region_id).first():
        raise ResourceNotFoundError("Region not found")


@router.get("/", response_model=List[SchoolOut])
async def list_schools(
    region_id: Optional[int] = Query(None, alias="regionId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    query = db.query(School)
    if region_id is not None:
        query = query.filter(School.region_id == region_id)
    return query.order_by(School.name).all()


@router.get("/{school_id}", response_model=SchoolOut)
async def get_school(school_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return _get_school(db, school_id)


@router.post("/", response_model=SchoolOut, status_code=201)
async def create_school(body: SchoolIn, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    _check_region(db, body.region_id)
    school = School(name=body.name, address=body.address, region_id=body.region_id)
    db.add(school)
    db.commit()
    db.refresh(school)
    return school


@router.put("/{school_id}", response_model=SchoolOut)
async def update_school(
    school_id: int,
    body: SchoolIn,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    school = _get_school(db, school_id)
    _check_region(db, body.region_id)
    school.name = body.name
    school.address = body.address
    school.region_id = body.region_id
    db.commit()
    db.refresh(school)
    return school


@router.delete("/{school_id}", response_model=MessageResponse)
async def delete_school(school_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    """Delete a school that has no locations left."""
    school = _get_school(db, school_id)
    if db.query(Location).filter(Location.school_id == school_id).count():
        raise ResourceConflictError("School still has locations")
    db.delete(school)
    db.commit()
    return MessageResponse(message="School deleted")
