# caltrack/deps/store.py
from fastapi import Depends, HTTPException, Request, status

from caltrack.db import Store
from caltrack.errors import NotFoundError
from caltrack.record_store import RecordStore
from caltrack.settings import Settings

def get_store(request: Request) -> Store:
    store = getattr(request.app.state, "store", None)
    if store is None or not store.is_open:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable")
    return store

def get_records(store: Store = Depends(get_store)) -> RecordStore:
    return RecordStore(store)

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings

def require_rows(affected: int, what: str) -> None:
    """Turn a zero-rows-affected store result into a 404."""
    if affected == 0:
        raise NotFoundError(f"{what} not found")
