"""Seed the default admin user from env vars."""

import logging

from sqlalchemy.orm import Session

from labtrack.core.config import Settings
from labtrack.core.security import hash_password
from labtrack.models.user import User, UserRole

logger = logging.getLogger("labtrack.seed")


def seed_admin(db: Session, settings: Settings) -> None:
    """Create the default admin user if not already present."""
    existing = db.query(User).filter(User.email == settings.DEFAULT_ADMIN_EMAIL).first()
    if existing:
        logger.info("ℹ️  Admin '%s' already exists, skipping.", settings.DEFAULT_ADMIN_EMAIL)
        return

    admin = User(
        name="Admin User",
        email=settings.DEFAULT_ADMIN_EMAIL,
        hashed_password=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
        role=UserRole.admin,
    )
    db.add(admin)
    db.commit()
    logger.info("✅ Admin '%s' created", settings.DEFAULT_ADMIN_EMAIL)
