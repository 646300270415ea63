import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from caltrack.db import Store, ensure_schema
from caltrack.main import create_app
from caltrack.record_store import RecordStore
from caltrack.seed import ensure_builtins
from caltrack.settings import Settings


@pytest_asyncio.fixture
async def store(tmp_path):
    s = Store(tmp_path / "calisthenics.db")
    await ensure_schema(s)
    yield s
    await s.close()


@pytest_asyncio.fixture
async def records(store):
    return RecordStore(store)


@pytest_asyncio.fixture
async def seeded(store):
    await ensure_builtins(store)
    return RecordStore(store)


@pytest.fixture
def settings(tmp_path):
    return Settings(DB_PATH=tmp_path / "api.db", EXPORT_DIR=tmp_path / "exports", LOG_LEVEL="WARNING")


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
