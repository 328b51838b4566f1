from typing import Dict, List, Sequence
from propman.schemas.property import Property
from propman.schemas.tenant import Tenant, TenantStatus
from propman.schemas.stats import DashboardStats, PropertyRollup

# Pure derivations over the current collections. No side effects, safe to
# call on every read.

def compute_stats(properties: Sequence[Property], tenants: Sequence[Tenant]) -> DashboardStats:
    """
    Portfolio-wide aggregates for the dashboard.
    Only active tenants count toward tenants, rent and occupancy;
    a property without a declared unit count is treated as one unit.
    """
    active = [t for t in tenants if t.is_active]
    late_payments = sum(1 for t in tenants if t.status == TenantStatus.LATE)
    total_units = sum(p.units or 1 for p in properties)

    occupancy_rate = 0.0
    if total_units > 0:
        occupancy_rate = len(active) / total_units * 100

    return DashboardStats(
        total_properties=len(properties),
        total_tenants=len(active),
        total_monthly_rent=float(sum(t.rent_amount for t in active)),
        occupancy_rate=occupancy_rate,
        late_payments=late_payments,
    )

def property_rollup(prop: Property, tenants: Sequence[Tenant]) -> PropertyRollup:
    active = [t for t in tenants if t.property_id == prop.id and t.is_active]
    return PropertyRollup(
        property_id=prop.id,
        active_tenants=len(active),
        monthly_rent=float(sum(t.rent_amount for t in active)),
        units=prop.units,
    )

def portfolio_rollups(properties: Sequence[Property], tenants: Sequence[Tenant]) -> List[PropertyRollup]:
    """One rollup per property, in property insertion order."""
    by_property: Dict[str, List[Tenant]] = {}
    for t in tenants:
        by_property.setdefault(t.property_id, []).append(t)

    return [property_rollup(p, by_property.get(p.id, [])) for p in properties]
