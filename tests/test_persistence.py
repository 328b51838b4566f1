import json
import logging

from propman.core.errors import StorageError
from propman.core.store import DataStore
from propman.db.storage import FileStorage, InMemoryStorage

class FailingStorage(InMemoryStorage):
    def __init__(self):
        super().__init__()
        self.fail = False

    def set_item(self, key, value):
        if self.fail:
            raise StorageError("quota exceeded")
        super().set_item(key, value)

def populate(store, property_data, tenant_data):
    a = store.add_property({**property_data, "units": 3, "purchasePrice": 250000, "purchaseDate": "2019-06-01"})
    b = store.add_property({**property_data, "name": "Oak House", "type": "rental_home"})
    t1 = store.add_tenant({**tenant_data, "propertyId": a.id, "unit": "2B", "notes": "Has a cat"})
    store.add_tenant({**tenant_data, "propertyId": b.id, "status": "late"})
    store.update_tenant(t1.id, {"rentAmount": 1250.5})
    store.attach_lease(t1.id, "lease.pdf", b"%PDF-1.4 body")
    store.update_property(b.id, {"notes": "Needs roof"})
    return a, b

def test_round_trip_through_file_storage(tmp_path, property_data, tenant_data):
    store = DataStore(FileStorage(str(tmp_path)))
    store.load()
    a, b = populate(store, property_data, tenant_data)
    store.delete_property(a.id)
    populate(store, property_data, tenant_data)

    restarted = DataStore(FileStorage(str(tmp_path)))
    restarted.load()

    assert restarted.properties == store.properties
    assert restarted.tenants == store.tenants

def test_stored_layout_uses_named_entries_and_camel_case(storage, store, property_data, tenant_data):
    populate(store, property_data, tenant_data)

    properties = json.loads(storage.get_item("pm_properties"))
    tenants = json.loads(storage.get_item("pm_tenants"))

    assert isinstance(properties, list) and len(properties) == 2
    assert "zipCode" in properties[0] and "createdAt" in properties[0]
    # Absent optional fields are omitted rather than stored as null
    assert "notes" not in properties[0]
    lease = tenants[0]["lease"]
    assert lease["fileName"] == "lease.pdf"
    assert lease["fileData"].startswith("data:application/pdf;base64,")
    assert tenants[0]["leaseStart"] == "2024-01-01"

def test_missing_entries_load_empty():
    store = DataStore(InMemoryStorage())
    store.load()
    assert store.properties == []
    assert store.tenants == []
    assert store.loading is False

def stored_tenant(tenant_data, property_id="p1"):
    return {**tenant_data, "propertyId": property_id, "id": "t1",
            "createdAt": "2024-01-01T00:00:00Z", "updatedAt": "2024-01-01T00:00:00Z"}

def test_corrupt_entry_loads_empty_and_logs(caplog):
    storage = InMemoryStorage({"pm_properties": "{not json", "pm_tenants": "[]"})
    store = DataStore(storage)

    with caplog.at_level(logging.WARNING):
        store.load()

    assert store.properties == []
    assert "pm_properties" in caplog.text

def test_lost_properties_entry_drops_orphaned_tenants(caplog, storage, store, property_data, tenant_data):
    prop = store.add_property(property_data)
    store.add_tenant({**tenant_data, "propertyId": prop.id})
    storage.set_item("pm_properties", "{not json")

    restarted = DataStore(storage)
    with caplog.at_level(logging.WARNING):
        restarted.load()

    assert restarted.properties == []
    assert restarted.tenants == []
    assert "without a live property" in caplog.text

    stats = restarted.get_stats()
    assert stats.total_tenants == 0
    assert stats.total_monthly_rent == 0

def test_orphaned_tenants_are_dropped_but_valid_ones_kept(property_data, tenant_data):
    storage = InMemoryStorage()
    store = DataStore(storage)
    store.load()
    prop = store.add_property(property_data)
    keep = store.add_tenant({**tenant_data, "propertyId": prop.id})
    tenants = json.loads(storage.get_item("pm_tenants"))
    storage.set_item("pm_tenants", json.dumps(tenants + [stored_tenant(tenant_data, "gone")]))

    restarted = DataStore(storage)
    restarted.load()
    assert restarted.tenants == [keep]

def test_trusting_mode_keeps_tenants_without_property(tenant_data):
    storage = InMemoryStorage({"pm_tenants": json.dumps([stored_tenant(tenant_data)])})
    store = DataStore(storage, strict_references=False)
    store.load()
    assert len(store.tenants) == 1

def test_records_of_wrong_shape_load_empty():
    storage = InMemoryStorage({"pm_properties": json.dumps({"not": "a list"}), "pm_tenants": "[]"})
    store = DataStore(storage)
    store.load()
    assert store.properties == []

def test_write_failure_is_a_warning_not_a_crash(property_data):
    storage = FailingStorage()
    store = DataStore(storage)
    store.load()

    storage.fail = True
    prop = store.add_property(property_data)
    assert store.get_property(prop.id) == prop
    assert "quota exceeded" in store.persistence_warning

    storage.fail = False
    store.update_property(prop.id, {"name": "Retry"})
    assert store.persistence_warning is None
    assert "Retry" in storage.get_item("pm_properties")

def test_nothing_is_written_during_load(storage):
    store = DataStore(storage)
    store.load()
    assert storage.get_item("pm_properties") is None
    assert storage.get_item("pm_tenants") is None
