from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from urllib.parse import quote
import logging
import os

from propman.api.deps import get_store
from propman.core.config import settings
from propman.core.leases import decode_data_uri
from propman.core.store import DataStore
from propman.schemas.tenant import Tenant, TenantUpdate

router = APIRouter()
logger = logging.getLogger(__name__)

# Printable ASCII minus the characters that would end a quoted header value
_HEADER_SAFE = set(chr(c) for c in range(32, 127)) - {'"', "\\"}

def _content_disposition(file_name: str) -> str:
    # Plain-ASCII fallback for old clients, RFC 5987 form carries the real name
    stem, ext = os.path.splitext(file_name)
    safe_stem = "".join(c for c in stem if c in _HEADER_SAFE).strip()
    safe_ext = "".join(c for c in ext if c in _HEADER_SAFE)
    fallback = (safe_stem or "lease") + safe_ext
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"

def _get_tenant_or_404(store: DataStore, tenant_id: str) -> Tenant:
    tenant = store.get_tenant(tenant_id)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant

@router.get("/tenants/{tenant_id}", response_model=Tenant)
def get_tenant(tenant_id: str, store: DataStore = Depends(get_store)):
    return _get_tenant_or_404(store, tenant_id)

@router.patch("/tenants/{tenant_id}", response_model=Tenant)
def update_tenant(tenant_id: str, updates: TenantUpdate, store: DataStore = Depends(get_store)):
    tenant = store.update_tenant(tenant_id, updates)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant

@router.delete("/tenants/{tenant_id}", status_code=204)
def delete_tenant(tenant_id: str, store: DataStore = Depends(get_store)):
    if not store.delete_tenant(tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found")
    return Response(status_code=204)

@router.post("/tenants/{tenant_id}/lease", response_model=Tenant)
async def upload_lease(
    tenant_id: str,
    file: UploadFile = File(...),
    store: DataStore = Depends(get_store),
):
    """Attach a lease document to the tenant, replacing any existing one."""
    _get_tenant_or_404(store, tenant_id)

    file_name = file.filename or ""
    if not file_name.lower().endswith(tuple(settings.LEASE_EXTENSIONS)):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file format. Allowed: {', '.join(settings.LEASE_EXTENSIONS)}",
        )

    content = await file.read()
    if len(content) > settings.MAX_LEASE_BYTES:
        raise HTTPException(status_code=413, detail=f"Lease exceeds {settings.MAX_LEASE_BYTES} bytes")

    tenant = store.attach_lease(tenant_id, file_name, content, file.content_type)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")

    logger.info(f"Lease uploaded for tenant {tenant_id}: {file_name} ({len(content)} bytes)")
    return tenant

@router.get("/tenants/{tenant_id}/lease")
def download_lease(tenant_id: str, store: DataStore = Depends(get_store)):
    tenant = _get_tenant_or_404(store, tenant_id)
    if tenant.lease is None or not tenant.lease.file_data:
        raise HTTPException(status_code=404, detail="No lease on file for this tenant")

    try:
        content_type, content = decode_data_uri(tenant.lease.file_data)
    except ValueError as e:
        logger.error(f"Stored lease for tenant {tenant_id} is unreadable: {e}")
        raise HTTPException(status_code=500, detail="Stored lease could not be decoded")

    return Response(
        content=content,
        media_type=content_type,
        headers={"Content-Disposition": _content_disposition(tenant.lease.file_name)},
    )

@router.delete("/tenants/{tenant_id}/lease", response_model=Tenant)
def delete_lease(tenant_id: str, store: DataStore = Depends(get_store)):
    tenant = store.remove_lease(tenant_id)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant
