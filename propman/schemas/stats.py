from typing import List, Optional

from propman.schemas.common import CamelModel
from propman.schemas.property import Property

class DashboardStats(CamelModel):
    total_properties: int = 0
    total_tenants: int = 0  # active tenants only
    total_monthly_rent: float = 0.0
    occupancy_rate: float = 0.0  # percent, unrounded
    late_payments: int = 0

class PropertyRollup(CamelModel):
    property_id: str
    active_tenants: int = 0
    monthly_rent: float = 0.0
    units: Optional[int] = None

class PropertyCard(CamelModel):
    property: Property
    rollup: PropertyRollup

class DashboardResponse(CamelModel):
    stats: DashboardStats
    properties: List[PropertyCard] = []
    loading: bool = False
