"""Region model."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from labtrack.db.base import Base, utcnow


class Region(Base):
    """Top of the containment hierarchy, e.g. "North Zone"."""
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    schools = relationship("School", back_populates="region", lazy="selectin")
