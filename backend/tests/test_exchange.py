import json

import pytest

from caltrack.db import Store, ensure_schema
from caltrack.errors import ParseError, ProgressionChainError, ReferentialError
from caltrack.portability import exchange
from caltrack.portability.files import write_and_share
from caltrack.record_store import RecordStore
from caltrack.schemas.exercise import ExerciseCreate
from caltrack.schemas.set_record import SetRecordCreate
from caltrack.schemas.workout import WorkoutCreate
from caltrack.schemas.workout_exercise import WorkoutExerciseCreate


async def with_history(records):
    w = await records.create_workout(WorkoutCreate(name="Pull Day", goal="strength"))
    we = await records.add_workout_exercise(
        w.id, WorkoutExerciseCreate(exercise_id=1, progression_id=4, sets=3, reps=5, weight=7.5, notes="slow")
    )
    await records.record_set(we.id, SetRecordCreate(set_number=1))
    await records.record_set(we.id, SetRecordCreate(set_number=2, completed=False))
    return w


@pytest.mark.asyncio
async def test_round_trip_into_empty_store(seeded, tmp_path):
    await with_history(seeded)
    text = await exchange.export_json(seeded)

    async with Store(tmp_path / "restored.db") as fresh_store:
        await ensure_schema(fresh_store)
        fresh = RecordStore(fresh_store)
        summary = await exchange.import_json(fresh, text)
        assert summary.created["exercises"] == 6
        assert summary.created["sets"] == 2
        assert summary.updated == {}
        assert await exchange.export_document(fresh) == await exchange.export_document(seeded)


@pytest.mark.asyncio
async def test_export_uses_camel_case_keys(seeded):
    await with_history(seeded)
    doc = json.loads(await exchange.export_json(seeded))
    assert set(doc) == {"workouts", "exercises", "progressions", "workoutExercises", "sets"}
    assert {"isCustom", "prevProgressionId"} <= set(doc["exercises"][0]) | set(doc["progressions"][0])
    assert "createdAt" in doc["workouts"][0]
    assert doc["sets"][1]["completedAt"] is None


@pytest.mark.asyncio
async def test_exercises_only_document_leaves_other_tables(seeded):
    await with_history(seeded)
    before = await exchange.export_document(seeded)
    payload = {"exercises": [{"id": 1, "name": "Chin-up", "category": "pull-ups", "subtype": "dynamic", "isCustom": False}]}

    summary = await exchange.import_json(seeded, json.dumps(payload))
    assert summary.updated == {"exercises": 1}
    after = await exchange.export_document(seeded)
    assert after.workouts == before.workouts
    assert after.progressions == before.progressions
    assert after.workout_exercises == before.workout_exercises
    assert after.sets == before.sets
    assert (await seeded.get_exercise(1)).name == "Chin-up"


@pytest.mark.asyncio
async def test_import_adds_new_rows(records):
    payload = {"exercises": [{"id": 40, "name": "Handstand", "category": "push-ups"}]}
    summary = await exchange.import_json(records, json.dumps(payload))
    assert summary.created == {"exercises": 1}
    assert (await records.get_exercise(40)).name == "Handstand"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [
    "not json at all",
    '{"workouts": [{"id": "seven", "name": "x", "createdAt": "2024-01-01T00:00:00"}]}',
    '{"exercises": [{"name": "missing id"}]}',
])
async def test_malformed_document_writes_nothing(seeded, text):
    before = await exchange.export_document(seeded)
    with pytest.raises(ParseError):
        await exchange.import_json(seeded, text)
    assert await exchange.export_document(seeded) == before


@pytest.mark.asyncio
async def test_broken_chain_document_is_rolled_back(records):
    payload = {
        "exercises": [{"id": 1, "name": "Dip"}],
        "progressions": [
            {"id": 1, "exerciseId": 1, "name": "a", "difficulty": 1, "nextProgressionId": 2},
            {"id": 2, "exerciseId": 1, "name": "b", "difficulty": 2},
        ],
    }
    with pytest.raises(ProgressionChainError):
        await exchange.import_json(records, json.dumps(payload))
    assert await records.list_exercises() == []


@pytest.mark.asyncio
async def test_export_to_file(seeded, tmp_path):
    shared = []
    result = await exchange.export_to_file(seeded, tmp_path / "out", share=shared.append)
    assert result.path.name == exchange.EXPORT_FILENAME
    assert result.shared
    assert shared == [result.path]
    assert json.loads(result.path.read_text(encoding="utf-8"))["exercises"][0]["name"] == "Pull-up"


@pytest.mark.asyncio
async def test_failing_share_keeps_file(tmp_path):
    def broken(path):
        raise RuntimeError("no share sheet")
    result = await write_and_share(tmp_path / "x.md", "hello", broken)
    assert result.shared is False
    assert result.path.read_text(encoding="utf-8") == "hello"


@pytest.mark.asyncio
async def test_async_share_hook(tmp_path):
    async def hook(path):
        return False
    result = await write_and_share(tmp_path / "x.md", "hello", hook)
    assert result.shared is False


@pytest.mark.asyncio
@pytest.mark.parametrize("payload,entity", [
    ({"workoutExercises": [{"id": 1, "workoutId": 99, "exerciseId": 1, "sets": 2}]}, "workout"),
    ({"sets": [{"id": 1, "workoutExerciseId": 55, "setNumber": 1, "completed": True}]}, "workout exercise"),
    ({"progressions": [{"id": 1, "exerciseId": 77, "name": "Tuck", "difficulty": 3}]}, "exercise"),
    ({"workouts": [{"id": 1, "name": "A", "createdAt": "2024-01-01T08:00:00"}],
      "workoutExercises": [{"id": 1, "workoutId": 1, "exerciseId": 1, "progressionId": 42}]}, "progression"),
])
async def test_rows_with_missing_parents_roll_back(records, payload, entity):
    with pytest.raises(ReferentialError) as err:
        await exchange.import_json(records, json.dumps(payload))
    assert err.value.entity == entity
    doc = await exchange.export_document(records)
    assert (doc.workouts, doc.workout_exercises, doc.sets, doc.progressions) == ([], [], [], [])


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"workouts": [{"id": 1, "name": "A", "createdAt": "2024-01-01T08:00:00"}],
     "workoutExercises": [{"id": 1, "workoutId": 1, "exerciseId": 1, "sets": 0}]},
    {"exercises": [{"id": 1, "name": "Dip"}],
     "progressions": [{"id": 1, "exerciseId": 1, "name": "Bench Dip", "difficulty": 11}]},
    {"exercises": [{"id": 1, "name": "   "}]},
    {"sets": [{"id": 1, "workoutExerciseId": 1, "setNumber": 0, "completed": True}]},
])
async def test_rows_breaking_create_rules_are_rejected(records, payload):
    with pytest.raises(ParseError):
        await exchange.import_json(records, json.dumps(payload))
    assert await records.list_exercises() == []


@pytest.mark.asyncio
async def test_block_of_deleted_exercise_round_trips(records, tmp_path):
    ex = await records.create_exercise(ExerciseCreate(name="Typewriter Pull-up"))
    w = await records.create_workout(WorkoutCreate(name="Pull Day"))
    await records.add_workout_exercise(w.id, WorkoutExerciseCreate(exercise_id=ex.id, sets=2))
    await records.delete_exercise(ex.id)
    text = await exchange.export_json(records)

    async with Store(tmp_path / "restored.db") as fresh_store:
        await ensure_schema(fresh_store)
        fresh = RecordStore(fresh_store)
        await exchange.import_json(fresh, text)
        [block] = await fresh.list_workout_exercises_for_workout(w.id)
        assert block.exercise_id == ex.id and block.exercise_name is None
