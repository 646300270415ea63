import pytest
from fastapi.testclient import TestClient

from caltrack import main
from caltrack.db import Store

def test_ping(client):
    r = client.get("/ping")
    assert r.status_code == 200
    assert r.json() == {"pong": True}

def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_version(client):
    r = client.get("/version")
    assert r.status_code == 200
    assert r.json() == {"version": "dev"}

def test_request_id_is_echoed(client):
    r = client.get("/ping", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"

def test_healthz_degraded(client, monkeypatch):
    async def boom():
        raise RuntimeError("db down")
    monkeypatch.setattr(client.app.state.store, "ping", boom)
    body = client.get("/healthz").json()
    assert body["status"] == "degraded"
    assert "db down" in body["error"]

def test_store_closed_when_startup_fails(settings, monkeypatch):
    stores = []

    class TrackedStore(Store):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            stores.append(self)

    async def broken_seed(store):
        raise RuntimeError("seed failed")

    monkeypatch.setattr(main, "Store", TrackedStore)
    monkeypatch.setattr(main, "ensure_builtins", broken_seed)
    with pytest.raises(Exception):
        with TestClient(main.create_app(settings)):
            pass
    [store] = stores
    assert not store.is_open
