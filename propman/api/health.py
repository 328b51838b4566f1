from fastapi import APIRouter, Depends
from propman.api.deps import get_store
from propman.core.store import DataStore

router = APIRouter()

@router.get("/health")
async def health(store: DataStore = Depends(get_store)):
    return {"status": "ok", "loading": store.loading}
