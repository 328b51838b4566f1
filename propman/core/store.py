from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Tuple, Type, TypeVar, Union
import logging
import threading
import uuid

from pydantic import BaseModel, TypeAdapter, ValidationError

from propman.core.errors import PropertyNotFoundError, StorageError, StoreNotReadyError
from propman.core.leases import build_lease
from propman.core import stats as stats_engine
from propman.db.storage import KeyValueStorage
from propman.schemas.property import Property, PropertyCreate, PropertyUpdate
from propman.schemas.stats import DashboardStats, PropertyRollup
from propman.schemas.tenant import Tenant, TenantCreate, TenantUpdate

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_PROPERTY_LIST = TypeAdapter(List[Property])
_TENANT_LIST = TypeAdapter(List[Tenant])

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def _coerce(model: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
    if type(data) is model:
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    return model.model_validate(data)

def _find(records: list, record_id: str) -> Optional[int]:
    for i, record in enumerate(records):
        if record.id == record_id:
            return i
    return None

class DataStore:
    """
    Owns the Property and Tenant collections for the running application.

    The in-memory lists are the source of truth; every mutation writes the
    affected collection back to `storage` in full. Records handed out are
    frozen models, so callers can only change state through the methods below.
    Unknown ids on update/delete are silent no-ops.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        properties_key: str = "pm_properties",
        tenants_key: str = "pm_tenants",
        strict_references: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.storage = storage
        self.properties_key = properties_key
        self.tenants_key = tenants_key
        self.strict_references = strict_references
        self._clock = clock or _utcnow
        self._lock = threading.RLock()
        self._properties: List[Property] = []
        self._tenants: List[Tenant] = []
        self._loading = True
        # Last write failure, cleared by the next successful write
        self.persistence_warning: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def properties(self) -> List[Property]:
        with self._lock:
            return list(self._properties)

    @property
    def tenants(self) -> List[Tenant]:
        with self._lock:
            return list(self._tenants)

    def snapshot(self) -> Tuple[List[Property], List[Tenant]]:
        """Both collections as read under one lock, for derived views that need them consistent."""
        with self._lock:
            return list(self._properties), list(self._tenants)

    # Loading & persistence

    def load(self):
        """Read both collections from storage. Missing or corrupt entries load as empty."""
        with self._lock:
            self._properties = self._read(self.properties_key, _PROPERTY_LIST)
            self._tenants = self._read(self.tenants_key, _TENANT_LIST)
            if self.strict_references:
                self._tenants = self._drop_orphans(self._tenants)
            self._loading = False
        logger.info(f"Store loaded: {len(self._properties)} properties, {len(self._tenants)} tenants")

    def _read(self, key: str, adapter: TypeAdapter) -> list:
        try:
            raw = self.storage.get_item(key)
        except StorageError as e:
            logger.warning(f"Storage entry '{key}' unreadable, starting empty: {e}")
            return []

        if raw is None:
            return []

        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Storage entry '{key}' is corrupt ({e.error_count()} errors), starting empty")
            return []

    def _drop_orphans(self, tenants: List[Tenant]) -> List[Tenant]:
        # A lost properties entry must not leave tenants pointing at nothing
        property_ids = {p.id for p in self._properties}
        kept = [t for t in tenants if t.property_id in property_ids]
        dropped = len(tenants) - len(kept)
        if dropped:
            logger.warning(f"Storage entry '{self.tenants_key}' had {dropped} tenants without a live property, dropped")
        return kept

    def _persist(self, *which: str):
        failures = []
        for key in which:
            if key == self.properties_key:
                payload = _PROPERTY_LIST.dump_json(self._properties, by_alias=True, exclude_none=True)
            else:
                payload = _TENANT_LIST.dump_json(self._tenants, by_alias=True, exclude_none=True)
            try:
                self.storage.set_item(key, payload.decode("utf-8"))
            except StorageError as e:
                logger.warning(f"Persisting '{key}' failed, in-memory state kept: {e}")
                failures.append(str(e))

        self.persistence_warning = "; ".join(failures) if failures else None

    def _ensure_ready(self):
        if self._loading:
            raise StoreNotReadyError("Store is still loading")

    def _touch(self, previous: datetime) -> datetime:
        # updatedAt never moves backwards, even if the clock does
        if previous.tzinfo is None:
            previous = previous.replace(tzinfo=timezone.utc)
        return max(self._clock(), previous)

    def _require_property(self, property_id: str):
        if self.strict_references and _find(self._properties, property_id) is None:
            raise PropertyNotFoundError(property_id)

    # Properties

    def add_property(self, data: Union[PropertyCreate, Mapping[str, Any]]) -> Property:
        data = _coerce(PropertyCreate, data)
        with self._lock:
            self._ensure_ready()
            now = self._clock()
            record = Property(id=str(uuid.uuid4()), created_at=now, updated_at=now, **data.model_dump())
            self._properties.append(record)
            self._persist(self.properties_key)
        logger.info(f"Property added: {record.id} ({record.name})")
        return record

    def update_property(self, property_id: str, updates: Union[PropertyUpdate, Mapping[str, Any]]) -> Optional[Property]:
        """Merge `updates` onto the property. Returns the new record, or None if the id is unknown."""
        changes = _coerce(PropertyUpdate, updates).model_dump(exclude_unset=True)
        with self._lock:
            self._ensure_ready()
            idx = _find(self._properties, property_id)
            if idx is None:
                logger.debug(f"update_property: no property {property_id}")
                return None

            current = self._properties[idx]
            record = Property.model_validate({
                **current.model_dump(),
                **changes,
                "updated_at": self._touch(current.updated_at),
            })
            self._properties[idx] = record
            self._persist(self.properties_key)
        logger.info(f"Property updated: {property_id} fields={sorted(changes)}")
        return record

    def delete_property(self, property_id: str) -> bool:
        """Remove the property and every tenant that references it."""
        with self._lock:
            self._ensure_ready()
            before = len(self._tenants)
            found = _find(self._properties, property_id) is not None

            self._properties = [p for p in self._properties if p.id != property_id]
            self._tenants = [t for t in self._tenants if t.property_id != property_id]
            removed_tenants = before - len(self._tenants)

            if found or removed_tenants:
                self._persist(self.properties_key, self.tenants_key)

        if found:
            logger.info(f"Property deleted: {property_id} (cascaded {removed_tenants} tenants)")
        return found

    def get_property(self, property_id: str) -> Optional[Property]:
        with self._lock:
            idx = _find(self._properties, property_id)
            return None if idx is None else self._properties[idx]

    # Tenants

    def add_tenant(self, data: Union[TenantCreate, Mapping[str, Any]]) -> Tenant:
        data = _coerce(TenantCreate, data)
        with self._lock:
            self._ensure_ready()
            self._require_property(data.property_id)
            now = self._clock()
            record = Tenant(id=str(uuid.uuid4()), created_at=now, updated_at=now, **data.model_dump())
            self._tenants.append(record)
            self._persist(self.tenants_key)
        logger.info(f"Tenant added: {record.id} to property {record.property_id}")
        return record

    def update_tenant(self, tenant_id: str, updates: Union[TenantUpdate, Mapping[str, Any]]) -> Optional[Tenant]:
        changes = _coerce(TenantUpdate, updates).model_dump(exclude_unset=True)
        with self._lock:
            self._ensure_ready()
            idx = _find(self._tenants, tenant_id)
            if idx is None:
                logger.debug(f"update_tenant: no tenant {tenant_id}")
                return None

            current = self._tenants[idx]
            if changes.get("property_id") not in (None, current.property_id):
                self._require_property(changes["property_id"])

            record = Tenant.model_validate({
                **current.model_dump(),
                **changes,
                "updated_at": self._touch(current.updated_at),
            })
            self._tenants[idx] = record
            self._persist(self.tenants_key)
        logger.info(f"Tenant updated: {tenant_id} fields={sorted(changes)}")
        return record

    def delete_tenant(self, tenant_id: str) -> bool:
        with self._lock:
            self._ensure_ready()
            idx = _find(self._tenants, tenant_id)
            if idx is None:
                return False
            del self._tenants[idx]
            self._persist(self.tenants_key)
        logger.info(f"Tenant deleted: {tenant_id}")
        return True

    def get_tenant(self, tenant_id: str) -> Optional[Tenant]:
        with self._lock:
            idx = _find(self._tenants, tenant_id)
            return None if idx is None else self._tenants[idx]

    def get_tenants_by_property(self, property_id: str) -> List[Tenant]:
        with self._lock:
            return [t for t in self._tenants if t.property_id == property_id]

    # Lease attachments

    def attach_lease(self, tenant_id: str, file_name: str, content: bytes, content_type: Optional[str] = None) -> Optional[Tenant]:
        """Store `content` as the tenant's lease, replacing any previous one."""
        if self.get_tenant(tenant_id) is None:
            return None
        lease = build_lease(file_name, content, content_type)
        return self.update_tenant(tenant_id, TenantUpdate(lease=lease))

    def remove_lease(self, tenant_id: str) -> Optional[Tenant]:
        return self.update_tenant(tenant_id, TenantUpdate(lease=None))

    # Stats

    def get_stats(self) -> DashboardStats:
        with self._lock:
            return stats_engine.compute_stats(self._properties, self._tenants)

    def get_property_rollup(self, property_id: str) -> Optional[PropertyRollup]:
        with self._lock:
            prop = self.get_property(property_id)
            if prop is None:
                return None
            return stats_engine.property_rollup(prop, self._tenants)

    def get_rollups(self) -> List[PropertyRollup]:
        with self._lock:
            return stats_engine.portfolio_rollups(self._properties, self._tenants)
