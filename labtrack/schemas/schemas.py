"""Pydantic schemas for API request/response serialization."""

from datetime import date, datetime, timezone
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, field_validator

from labtrack.core.exceptions import ValidationError
from labtrack.models.device import DeviceStatus, DeviceType
from labtrack.models.device_log import DeviceAction
from labtrack.models.user import UserRole


# ---- Auth ----
class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[Dict[str, Any]] = None


# ---- User ----
class UserOut(BaseModel):
    id: int
    username: str
    email: str
    role: UserRole
    affiliated_school_id: Optional[int] = None
    school_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserOut":
        return cls(
            id=user.id,
            username=user.name,
            email=user.email,
            role=user.role,
            affiliated_school_id=user.affiliated_school_id,
            school_name=user.affiliated_school.name if user.affiliated_school else None,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    role: UserRole
    affiliated_school_id: Optional[int] = None

class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
    affiliated_school_id: Optional[int] = None


# ---- Hierarchy ----
class RegionIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

class RegionOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SchoolIn(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    region_id: int

class SchoolOut(BaseModel):
    id: int
    name: str
    address: str
    region_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LocationIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    floor: Optional[int] = None
    building: Optional[str] = None
    school_id: int

class LocationOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    floor: Optional[int] = None
    building: Optional[str] = None
    school_id: int

    class Config:
        from_attributes = True


# ---- Device ----
class DeviceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    device_type: DeviceType
    location_id: int
    school_id: int
    status: DeviceStatus = DeviceStatus.active
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    warranty_expiry: Optional[date] = None

class DeviceUpdate(BaseModel):
    name: str = Field(..., min_length=1)
    device_type: DeviceType
    location_id: int
    school_id: int
    status: Optional[DeviceStatus] = None
    deactivation_reason: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    warranty_expiry: Optional[date] = None

class DeviceStatusUpdate(BaseModel):
    # Kept as a plain string so an unknown value is reported as a 400 by the service
    status: str
    deactivation_reason: Optional[str] = Field(None, alias="deactivationReason")

    class Config:
        populate_by_name = True

class DeviceOut(BaseModel):
    id: int
    name: str
    device_type: DeviceType
    status: DeviceStatus
    location_id: int
    location_name: Optional[str] = None
    school_id: int
    school_name: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    warranty_expiry: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_device(cls, device) -> "DeviceOut":
        return cls(
            id=device.id,
            name=device.name,
            device_type=device.device_type,
            status=device.status,
            location_id=device.location_id,
            location_name=device.location.name if device.location else "Unknown Location",
            school_id=device.school_id,
            school_name=device.school.name if device.school else "Unknown School",
            serial_number=device.serial_number,
            purchase_date=device.purchase_date,
            warranty_expiry=device.warranty_expiry,
            created_at=device.created_at,
            updated_at=device.updated_at,
        )


# ---- Device logs ----
class DeviceLogFilter(BaseModel):
    """AND-combined filter over device log entries. Every field is optional."""

    action: Optional[DeviceAction] = None
    device_id: Optional[int] = None
    performed_by: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    class Config:
        frozen = True

    @field_validator("action", mode="before")
    @classmethod
    def _all_means_any(cls, value):
        if value in ("", "all"):
            return None
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def _to_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @classmethod
    def from_query(
        cls,
        action: Optional[str] = None,
        device_id: Optional[int] = None,
        performed_by: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> "DeviceLogFilter":
        """Build and validate a filter from raw query values."""
        if action not in (None, "", "all"):
            try:
                action = DeviceAction(action)
            except ValueError:
                allowed = ", ".join(a.value for a in DeviceAction)
                raise ValidationError(f"Invalid action '{action}'. Must be one of: all, {allowed}.")
        log_filter = cls(
            action=action,
            device_id=device_id,
            performed_by=performed_by,
            start_date=start_date,
            end_date=end_date,
        )
        log_filter.check()
        return log_filter

    def check(self) -> None:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("start_date must not be after end_date")

class DeviceRef(BaseModel):
    id: str
    name: str
    device_type: str

class ActorRef(BaseModel):
    id: str
    username: str
    email: str
    role: str

class DeviceLogOut(BaseModel):
    id: int
    device: DeviceRef
    action: DeviceAction
    description: str
    deactivation_reason: Optional[str] = None
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    performed_by: ActorRef
    timestamp: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

class Pagination(BaseModel):
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool

class DeviceLogPage(BaseModel):
    logs: List[DeviceLogOut]
    pagination: Pagination


# ---- Generic ----
class MessageResponse(BaseModel):
    message: str
    detail: Optional[Any] = None
