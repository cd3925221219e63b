"""Users API router (admin only)."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from labtrack.core.security import Actor, require_admin
from labtrack.db.session import get_db
from labtrack.schemas.schemas import UserCreate, UserUpdate, UserOut, MessageResponse
from labtrack.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=List[UserOut])
async def list_users(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    return [UserOut.from_user(u) for u in user_service.list_users(db)]


@router.post("/", response_model=UserOut, status_code=201)
async def create_user(
    body: UserCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    return UserOut.from_user(user_service.create_user(db, body))


@router.patch("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: int,
    body: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    return UserOut.from_user(user_service.update_user(db, user_id, body))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    """Delete a user. Admins cannot delete themselves."""
    deleted = user_service.delete_user(db, user_id, actor)
    return MessageResponse(message="User deleted successfully", detail=deleted)
