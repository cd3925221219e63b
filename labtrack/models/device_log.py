"""Device activity log model — append-only."""

import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, JSON, Index
from labtrack.db.base import Base, utcnow


class DeviceAction(str, enum.Enum):
    created = "created"
    updated = "updated"
    deleted = "deleted"
    activated = "activated"
    deactivated = "deactivated"
    # Reserved; nothing emits these yet
    mounted = "mounted"
    unmounted = "unmounted"
    moved = "moved"


class DeviceLog(Base):
    """Immutable record of one device-affecting action.

    This table is APPEND-ONLY: no UPDATE or DELETE operations should ever
    be performed on it (enforced at application level).

    ``device_id`` and ``performed_by`` are plain indexed columns rather than
    foreign keys: entries must outlive the device or user they point at, and
    readers substitute placeholders for dangling references.
    """
    __tablename__ = "device_logs"
    __table_args__ = (
        Index("ix_device_logs_device_timestamp", "device_id", "timestamp"),
        Index("ix_device_logs_performed_by_timestamp", "performed_by", "timestamp"),
        Index("ix_device_logs_action_timestamp", "action", "timestamp"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(Integer, nullable=False)
    action = Column(Enum(DeviceAction), nullable=False)
    description = Column(String(500), nullable=False)
    deactivation_reason = Column(Text, nullable=True)  # only for "deactivated"
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    performed_by = Column(Integer, nullable=False)
    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)
    ip_address = Column(String(255), nullable=True)
    user_agent = Column(String(500), nullable=True)
