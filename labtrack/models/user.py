"""User model."""

import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from labtrack.db.base import Base, utcnow


class UserRole(str, enum.Enum):
    admin = "admin"
    engineer = "engineer"
    faculty = "faculty"


class User(Base):
    """Application user with a single role."""
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False)
    # Only meaningful for faculty
    affiliated_school_id = Column(Integer, ForeignKey("schools.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    affiliated_school = relationship("School", lazy="joined")
