import pytest
from fastapi.testclient import TestClient

from propman.core.store import DataStore
from propman.db.storage import InMemoryStorage
from propman.main import create_app

@pytest.fixture
def storage():
    return InMemoryStorage()

@pytest.fixture
def store(storage):
    store = DataStore(storage)
    store.load()
    return store

@pytest.fixture
def client(store):
    return TestClient(create_app(store))

@pytest.fixture
def property_data():
    return {
        "name": "Maple Court",
        "type": "apartment",
        "address": "12 Maple St",
        "city": "Springfield",
        "state": "IL",
        "zipCode": "62701",
    }

@pytest.fixture
def tenant_data():
    return {
        "name": "Jordan Lee",
        "email": "jordan@example.com",
        "phone": "555-0100",
        "rentAmount": 1200,
        "rentDueDay": 1,
        "leaseStart": "2024-01-01",
        "leaseEnd": "2024-12-31",
        "status": "active",
    }
