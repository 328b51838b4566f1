from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging
import os
import tempfile

from propman.core.errors import StorageError

logger = logging.getLogger(__name__)

class KeyValueStorage(ABC):
    """Named text slots, the durable mirror of the in-memory collections."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str):
        pass

    @abstractmethod
    def remove_item(self, key: str):
        pass

class InMemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._items[key] = value

    def remove_item(self, key: str):
        self._items.pop(key, None)

class FileStorage(KeyValueStorage):
    """
    One `<key>.json` file per entry inside `directory`.
    Writes land in a temp file first and are renamed over the target,
    so a reader never sees a half-written entry.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read '{key}': {e}") from e

    def set_item(self, key: str, value: str):
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_path, self._path(key))
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Could not write '{key}': {e}") from e
        logger.debug(f"Wrote {len(value)} chars to {self._path(key)}")

    def remove_item(self, key: str):
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Could not remove '{key}': {e}") from e

def build_storage(backend: str, data_dir: str) -> KeyValueStorage:
    if backend == "memory":
        return InMemoryStorage()
    if backend == "file":
        return FileStorage(data_dir)
    raise ValueError(f"Unknown storage backend '{backend}'")
