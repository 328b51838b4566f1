from fastapi import FastAPI
from pydantic import ValidationError
from typing import Optional
import logging

from propman.core.config import settings
from propman.core.errors import PropertyNotFoundError, StoreNotReadyError
from propman.core.middleware import (
    StorageWarningMiddleware,
    property_not_found_handler,
    store_not_ready_handler,
    validation_error_handler,
)
from propman.core.store import DataStore
from propman.db.storage import build_storage
from propman.api import dashboard, health, properties, reports, tenants

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

def build_store() -> DataStore:
    return DataStore(
        build_storage(settings.STORAGE_BACKEND, settings.DATA_DIR),
        properties_key=settings.PROPERTIES_KEY,
        tenants_key=settings.TENANTS_KEY,
        strict_references=settings.STRICT_TENANT_REFERENCES,
    )

def create_app(store: Optional[DataStore] = None) -> FastAPI:
    """
    Build the HTTP app around a single DataStore. The store is loaded at
    startup unless the caller already loaded it.
    """
    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.store = store if store is not None else build_store()

    app.add_middleware(StorageWarningMiddleware)
    app.add_exception_handler(StoreNotReadyError, store_not_ready_handler)
    app.add_exception_handler(PropertyNotFoundError, property_not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(properties.router)
    app.include_router(tenants.router)
    app.include_router(dashboard.router)
    app.include_router(reports.router)

    @app.on_event("startup")
    async def startup_event():
        if app.state.store.loading:
            logger.info(f"Loading data store ({settings.STORAGE_BACKEND})")
            app.state.store.load()

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
