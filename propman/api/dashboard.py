from fastapi import APIRouter, Depends

from propman.api.deps import get_store
from propman.core.config import settings
from propman.core.stats import compute_stats, portfolio_rollups
from propman.core.store import DataStore
from propman.schemas.stats import DashboardResponse, DashboardStats, PropertyCard

router = APIRouter()

@router.get("/stats", response_model=DashboardStats)
def get_stats(store: DataStore = Depends(get_store)):
    return store.get_stats()

@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(store: DataStore = Depends(get_store)):
    """
    Portfolio stats plus the first few properties with their own numbers.
    While `loading` is true the figures are not yet authoritative.
    """
    properties, tenants = store.snapshot()
    shown = properties[:settings.DASHBOARD_PROPERTY_LIMIT]
    rollups = portfolio_rollups(shown, tenants)

    return DashboardResponse(
        stats=compute_stats(properties, tenants),
        properties=[PropertyCard(property=p, rollup=r) for p, r in zip(shown, rollups)],
        loading=store.loading,
    )
