from pydantic import Field
from typing import Optional
from datetime import date, datetime
from enum import Enum

from propman.schemas.common import CamelModel, FROZEN

class TenantStatus(str, Enum):
    ACTIVE = "active"
    LATE = "late"
    INACTIVE = "inactive"

class Lease(CamelModel):
    model_config = FROZEN

    id: str
    file_name: str
    file_size: int = Field(..., ge=0)
    uploaded_at: datetime
    file_data: Optional[str] = None  # data:<mime>;base64,<payload>

class TenantFields(CamelModel):
    """Tenant attributes as entered for a property."""
    name: str = Field(..., min_length=1)
    email: str
    phone: str
    unit: Optional[str] = None
    rent_amount: float = Field(..., ge=0)
    rent_due_day: int = Field(..., ge=1, le=31)
    # leaseEnd >= leaseStart is expected but not enforced
    lease_start: date
    lease_end: date
    lease: Optional[Lease] = None
    status: TenantStatus = TenantStatus.ACTIVE
    notes: Optional[str] = None

class TenantCreate(TenantFields):
    property_id: str = Field(..., min_length=1)

class TenantUpdate(CamelModel):
    property_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    unit: Optional[str] = None
    rent_amount: Optional[float] = None
    rent_due_day: Optional[int] = None
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    lease: Optional[Lease] = None
    status: Optional[TenantStatus] = None
    notes: Optional[str] = None

class Tenant(TenantCreate):
    model_config = FROZEN

    id: str
    status: TenantStatus
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE
