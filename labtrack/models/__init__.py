"""Models package — import all models so metadata.create_all can discover them."""

from labtrack.models.region import Region
from labtrack.models.school import School
from labtrack.models.location import Location
from labtrack.models.user import User, UserRole
from labtrack.models.device import Device, DeviceStatus, DeviceType
from labtrack.models.device_log import DeviceLog, DeviceAction

__all__ = [
    "Region", "School", "Location",
    "User", "UserRole",
    "Device", "DeviceStatus", "DeviceType",
    "DeviceLog", "DeviceAction",
]
