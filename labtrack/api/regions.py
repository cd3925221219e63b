"""Regions API router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from labtrack.core.exceptions import ResourceConflictError, ResourceNotFoundError
from labtrack.core.security import Actor, get_current_actor, require_admin
from labtrack.db.session import get_db
from labtrack.models.region import Region
from labtrack.models.school import School
from labtrack.schemas.schemas import RegionIn, RegionOut, MessageResponse

router = APIRouter(prefix="/regions", tags=["regions"])


def _get_region(db: Session, region_id: int) -> Region:
    region = db.query(Region).filter(Region.id == region_id).first()
    if not region:
        raise ResourceNotFoundError("Region not found")
    return region


@router.get("/", response_model=List[RegionOut])
async def list_regions(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return db.query(Region).order_by(Region.name).all()


@router.get("/{region_id}", response_model=RegionOut)
async def get_region(region_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return _get_region(db, region_id)


@router.post("/", response_model=RegionOut, status_code=201)
async def create_region(body: RegionIn, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    """Create a region (admin only)."""
    if db.query(Region).filter(Region.name == body.name).first():
        raise ResourceConflictError(f"Region '{body.name}' already exists")
    region = Region(name=body.name, description=body.description)
    db.add(region)
    db.commit()
    db.refresh(region)
    return region


@router.put("/{region_id}", response_model=RegionOut)
async def update_region(
    region_id: int,
    body: RegionIn,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    region = _get_region(db, region_id)
    clash = db.query(Region).filter(Region.name == body.name, Region.id != region_id).first()
    if clash:
        raise ResourceConflictError(f"Region '{body.name}' already exists")
    region.name = body.name
    region.description = body.description
    db.commit()
    db.refresh(region)
    return region


@router.delete("/{region_id}", response_model=MessageResponse)
async def delete_region(region_id: int, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    """Delete an empty region."""
    region = _get_region(db, region_id)
    if db.query(School).filter(School.region_id == region_id).count():
        raise ResourceConflictError("Region still has schools")
    db.delete(region)
    db.commit()
    return MessageResponse(message="Region deleted")
