class StoreError(Exception):
    """Base class for data store failures."""


class StorageError(StoreError):
    """Durable storage could not be read or written."""


class StoreNotReadyError(StoreError):
    """A mutation was attempted before the initial load completed."""


class PropertyNotFoundError(StoreError):
    def __init__(self, property_id: str):
        self.property_id = property_id
        super().__init__(f"Property '{property_id}' not found")
