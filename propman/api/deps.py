from fastapi import Request
from propman.core.store import DataStore

def get_store(request: Request) -> DataStore:
    return request.app.state.store
