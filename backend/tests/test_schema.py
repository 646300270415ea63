import pytest
from sqlalchemy import inspect

from caltrack.db import Store, ensure_schema
from caltrack.errors import StoreUnavailableError
from caltrack.record_store import RecordStore
from caltrack.schemas.exercise import ExerciseCreate

TABLES = {"exercises", "progressions", "workouts", "workout_exercises", "sets"}


async def _table_names(store):
    async with store.engine.connect() as conn:
        return set(await conn.run_sync(lambda c: inspect(c).get_table_names()))


@pytest.mark.asyncio
async def test_creates_all_tables(store):
    assert TABLES <= await _table_names(store)


@pytest.mark.asyncio
async def test_ensure_schema_twice_keeps_data(store, records):
    await records.create_exercise(ExerciseCreate(name="Muscle-up"))
    await ensure_schema(store)
    assert [e.name for e in await records.list_exercises()] == ["Muscle-up"]


@pytest.mark.asyncio
async def test_reopen_keeps_data(tmp_path):
    path = tmp_path / "reopen.db"
    async with Store(path) as s:
        await ensure_schema(s)
        await RecordStore(s).create_exercise(ExerciseCreate(name="L-sit"))
    s2 = Store(path)
    await ensure_schema(s2)
    try:
        assert (await RecordStore(s2).find_exercise_by_name("l-sit")) is not None
    finally:
        await s2.close()


@pytest.mark.asyncio
async def test_unwritable_location_is_unavailable(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    with pytest.raises(StoreUnavailableError):
        await ensure_schema(Store(blocker / "db.sqlite"))


@pytest.mark.asyncio
async def test_closed_store_refuses_work(tmp_path):
    s = Store(tmp_path / "closed.db")
    assert not s.is_open
    with pytest.raises(StoreUnavailableError):
        async with s.transaction():
            pass
