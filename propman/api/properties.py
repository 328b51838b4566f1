from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List

from propman.api.deps import get_store
from propman.core.store import DataStore
from propman.schemas.property import Property, PropertyCreate, PropertyUpdate
from propman.schemas.stats import PropertyRollup
from propman.schemas.tenant import Tenant, TenantCreate, TenantFields

router = APIRouter()

@router.get("/properties", response_model=List[Property])
def list_properties(store: DataStore = Depends(get_store)):
    return store.properties

@router.post("/properties", response_model=Property, status_code=201)
def create_property(data: PropertyCreate, store: DataStore = Depends(get_store)):
    return store.add_property(data)

@router.get("/properties/{property_id}", response_model=Property)
def get_property(property_id: str, store: DataStore = Depends(get_store)):
    prop = store.get_property(property_id)
    if prop is None:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop

@router.patch("/properties/{property_id}", response_model=Property)
def update_property(property_id: str, updates: PropertyUpdate, store: DataStore = Depends(get_store)):
    prop = store.update_property(property_id, updates)
    if prop is None:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop

@router.delete("/properties/{property_id}", status_code=204)
def delete_property(property_id: str, store: DataStore = Depends(get_store)):
    """Deletes the property and all of its tenants."""
    if not store.delete_property(property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    return Response(status_code=204)

@router.get("/properties/{property_id}/tenants", response_model=List[Tenant])
def list_property_tenants(property_id: str, store: DataStore = Depends(get_store)):
    if store.get_property(property_id) is None:
        raise HTTPException(status_code=404, detail="Property not found")
    return store.get_tenants_by_property(property_id)

@router.post("/properties/{property_id}/tenants", response_model=Tenant, status_code=201)
def create_tenant(property_id: str, data: TenantFields, store: DataStore = Depends(get_store)):
    return store.add_tenant(TenantCreate(property_id=property_id, **data.model_dump()))

@router.get("/properties/{property_id}/rollup", response_model=PropertyRollup)
def get_property_rollup(property_id: str, store: DataStore = Depends(get_store)):
    rollup = store.get_property_rollup(property_id)
    if rollup is None:
        raise HTTPException(status_code=404, detail="Property not found")
    return rollup
