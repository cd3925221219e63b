"""Device model and its status / type enums."""

import enum

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from labtrack.db.base import Base, utcnow


class DeviceType(str, enum.Enum):
    desktop = "desktop"
    printer = "printer"
    cctv = "cctv"
    camera = "camera"
    server = "server"


class DeviceStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


class Device(Base):
    """Physical asset tracked at a location within a school."""
    __tablename__ = "devices"
    # Ids are never reused, so log entries of a deleted device stay dangling
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)  # e.g. CCTV-01, Printer-02
    device_type = Column(Enum(DeviceType), nullable=False)
    status = Column(Enum(DeviceStatus), default=DeviceStatus.active, nullable=False)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False, index=True)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=False, index=True)
    serial_number = Column(String(255), nullable=True)
    purchase_date = Column(Date, nullable=True)
    warranty_expiry = Column(Date, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    location = relationship("Location", lazy="joined")
    school = relationship("School", lazy="joined")

    def snapshot(self) -> dict:
        """The subset of fields captured in device log old/new values."""
        return {
            "name": self.name,
            "device_type": self.device_type.value,
            "location": self.location_id,
            "status": self.status.value,
        }
