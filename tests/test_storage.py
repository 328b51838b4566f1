import os
import pytest

from propman.core.errors import StorageError
from propman.db.storage import FileStorage, InMemoryStorage, build_storage

def test_file_storage_set_get_remove(tmp_path):
    storage = FileStorage(str(tmp_path / "data"))
    assert storage.get_item("pm_properties") is None

    storage.set_item("pm_properties", "[]")
    assert storage.get_item("pm_properties") == "[]"
    assert os.path.exists(tmp_path / "data" / "pm_properties.json")

    storage.set_item("pm_properties", '[{"id": "1"}]')
    assert storage.get_item("pm_properties") == '[{"id": "1"}]'
    # No temp files left behind
    assert os.listdir(tmp_path / "data") == ["pm_properties.json"]

    storage.remove_item("pm_properties")
    storage.remove_item("pm_properties")
    assert storage.get_item("pm_properties") is None

def test_file_storage_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    storage = FileStorage(str(blocker / "data"))

    with pytest.raises(StorageError):
        storage.set_item("pm_tenants", "[]")

def test_build_storage():
    assert isinstance(build_storage("memory", "unused"), InMemoryStorage)
    assert isinstance(build_storage("file", "data"), FileStorage)
    with pytest.raises(ValueError):
        build_storage("s3", "data")
