from pydantic import Field
from typing import Optional
from datetime import date, datetime
from enum import Enum

from propman.schemas.common import CamelModel, FROZEN

class PropertyType(str, Enum):
    CONDO = "condo"
    RENTAL_HOME = "rental_home"
    PLAZA = "plaza"
    APARTMENT = "apartment"
    COMMERCIAL = "commercial"

class PropertyCreate(CamelModel):
    name: str = Field(..., min_length=1)
    type: PropertyType
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    units: Optional[int] = Field(None, ge=1)
    purchase_price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    notes: Optional[str] = None
    image: Optional[str] = None  # URL or data URI

class PropertyUpdate(CamelModel):
    """
    Partial update. Only fields present in the payload are applied;
    an explicit null clears an optional field.
    """
    name: Optional[str] = None
    type: Optional[PropertyType] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    units: Optional[int] = None
    purchase_price: Optional[float] = None
    purchase_date: Optional[date] = None
    notes: Optional[str] = None
    image: Optional[str] = None

class Property(PropertyCreate):
    model_config = FROZEN

    id: str
    created_at: datetime
    updated_at: datetime
