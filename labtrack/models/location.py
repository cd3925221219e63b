"""Location (lab / room) model."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from labtrack.db.base import Base, utcnow


class Location(Base):
    """A room inside a school where devices are installed, e.g. "Lab 1"."""
    __tablename__ = "locations"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(String(500), nullable=True)
    floor = Column(Integer, nullable=True)
    building = Column(String(255), nullable=True)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    school = relationship("School", lazy="joined")
