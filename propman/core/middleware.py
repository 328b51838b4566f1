from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from typing import Callable
import logging

from propman.core.errors import PropertyNotFoundError, StoreNotReadyError

logger = logging.getLogger(__name__)

STORAGE_WARNING_HEADER = "X-Storage-Warning"

class StorageWarningMiddleware(BaseHTTPMiddleware):
    """
    Surfaces failed durable writes to the client as a response header.
    The request itself still succeeds; the in-memory state is authoritative.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)

        store = getattr(request.app.state, "store", None)
        warning = store.persistence_warning if store is not None else None
        if warning:
            logger.debug(f"Storage warning on {request.method} {request.url.path}: {warning}")
            # Header values must be single-line latin-1
            value = " ".join(warning.split()).encode("latin-1", "replace").decode("latin-1")
            response.headers[STORAGE_WARNING_HEADER] = value

        return response

async def store_not_ready_handler(request: Request, exc: StoreNotReadyError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})

async def property_not_found_handler(request: Request, exc: PropertyNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

async def validation_error_handler(request: Request, exc: ValidationError):
    # Merged partial updates are validated inside the store, after FastAPI's own request checks
    errors = exc.errors(include_url=False, include_context=False)
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.error_count()} validation errors")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})
