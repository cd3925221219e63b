"""Auth API router — login and me."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from labtrack.core.config import Settings
from labtrack.core.rate_limiter import limiter, login_rate_limit
from labtrack.core.security import Actor, get_current_actor, get_settings
from labtrack.db.session import get_db
from labtrack.schemas.schemas import LoginRequest, TokenResponse, UserOut
from labtrack.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit(login_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Authenticate and return a JWT access token."""
    return auth_service.authenticate(db, body.email, body.password, settings)


@router.get("/me", response_model=UserOut)
async def get_me(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Get current user profile."""
    return UserOut.from_user(auth_service.get_user(db, actor.id))
