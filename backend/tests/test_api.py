import json


def new_workout(client, name="Push Day"):
    r = client.post("/workouts", json={"name": name})
    assert r.status_code == 201
    return r.json()["id"]

def add_block(client, workout_id, **body):
    body = {"exerciseId": 2, "sets": 3, "reps": 10, **body}
    r = client.post(f"/workouts/{workout_id}/exercises", json=body)
    assert r.status_code == 201
    return r.json()["id"]

def test_builtins_are_served(client):
    r = client.get("/exercises")
    assert r.status_code == 200
    assert [e["name"] for e in r.json()][:2] == ["Pull-up", "Push-up"]
    assert r.json()[0]["isCustom"] is False

def test_filters_and_facets(client):
    assert [e["name"] for e in client.get("/exercises", params={"category": "core"}).json()] == ["Leg Raise", "Plank"]
    assert [e["name"] for e in client.get("/exercises", params={"search": "squ"}).json()] == ["Squat"]
    assert "pull-ups" in client.get("/exercises/categories").json()
    assert client.get("/exercises/subtypes", params={"category": "core"}).json() == ["dynamic", "isometric"]

def test_exercise_crud(client):
    r = client.post("/exercises", json={"name": "Muscle-up", "category": "pull-ups"})
    assert r.status_code == 201
    ex = r.json()
    assert ex["isCustom"] is True

    r = client.patch(f"/exercises/{ex['id']}", json={"subtype": "dynamic"})
    assert r.status_code == 200 and r.json()["subtype"] == "dynamic"

    assert client.delete(f"/exercises/{ex['id']}").status_code == 204
    assert client.get(f"/exercises/{ex['id']}").status_code == 404
    assert client.delete(f"/exercises/{ex['id']}").status_code == 404

def test_blank_exercise_name_rejected(client):
    assert client.post("/exercises", json={"name": "   "}).status_code == 422

def test_progressions_and_chain(client):
    chain = client.get("/exercises/1/chain").json()
    assert [p["difficulty"] for p in chain] == [2, 3, 4, 6, 8, 10]

    r = client.post("/exercises/1/progressions", json={"name": "Scapula Pull", "difficulty": 1})
    assert r.status_code == 201
    new = r.json()
    assert new["exerciseId"] == 1 and new["nextProgressionId"] == 1

    assert client.get(f"/progressions/{new['id']}").json()["name"] == "Scapula Pull"
    assert client.delete(f"/progressions/{new['id']}").status_code == 204
    assert client.get("/exercises/1/chain").json()[0]["id"] == 1

def test_progression_for_missing_exercise(client):
    r = client.post("/exercises/999/progressions", json={"name": "x"})
    assert r.status_code == 404

def test_bad_relink_conflicts(client):
    r = client.patch("/progressions/6", json={"nextProgressionId": 1})
    assert r.status_code == 409
    assert client.get("/progressions/6").json()["nextProgressionId"] is None

def test_workout_flow(client):
    wid = new_workout(client)
    we = add_block(client, wid)
    r = client.post(f"/workout-exercises/{we}/increment-sets")
    assert r.status_code == 200 and r.json()["sets"] == 4

    r = client.post(f"/workout-exercises/{we}/sets", json={"setNumber": 1})
    assert r.status_code == 201
    assert r.json()["completed"] is True
    assert len(client.get(f"/workout-exercises/{we}/sets").json()) == 1

    blocks = client.get(f"/workouts/{wid}/exercises").json()
    assert blocks[0]["exerciseName"] == "Push-up"

    assert client.delete(f"/workout-exercises/{we}").status_code == 204
    assert client.get(f"/workout-exercises/{we}/sets").json() == []
    assert client.get(f"/workouts/{wid}/exercises").json() == []

def test_workout_update_and_delete(client):
    wid = new_workout(client, "Legs")
    r = client.patch(f"/workouts/{wid}", json={"comments": "heavy"})
    assert r.status_code == 200 and r.json()["comments"] == "heavy"
    assert client.delete(f"/workouts/{wid}").status_code == 204
    assert client.get(f"/workouts/{wid}").status_code == 404
    assert client.patch(f"/workouts/{wid}", json={"name": "x"}).status_code == 404

def test_block_with_missing_refs(client):
    wid = new_workout(client)
    assert client.post(f"/workouts/{wid}/exercises", json={"exerciseId": 999}).status_code == 404
    assert client.post("/workouts/999/exercises", json={"exerciseId": 1}).status_code == 404
    assert client.post("/workout-exercises/999/sets", json={"setNumber": 1}).status_code == 404

def test_block_validation(client):
    wid = new_workout(client)
    assert client.post(f"/workouts/{wid}/exercises", json={"exerciseId": 1, "sets": 0}).status_code == 422
    assert client.post(f"/workouts/{wid}/exercises", json={"exerciseId": 1, "reps": -1}).status_code == 422

def test_export_and_import(client):
    wid = new_workout(client)
    add_block(client, wid)
    r = client.get("/transfer/export")
    assert r.status_code == 200
    doc = r.json()
    assert doc["workouts"][0]["id"] == wid

    r = client.post("/transfer/import", content=json.dumps({"exercises": doc["exercises"][:1]}))
    assert r.status_code == 200
    assert r.json()["updated"] == {"exercises": 1}

def test_import_garbage_is_400(client):
    r = client.post("/transfer/import", content="{not json")
    assert r.status_code == 400

def test_export_file(client, settings):
    r = client.post("/transfer/export-file")
    assert r.status_code == 200
    assert (settings.EXPORT_DIR / "calisthenics_export.json").exists()
    assert r.json()["shared"] is False

def test_text_exports(client):
    wid = new_workout(client, "Upper")
    add_block(client, wid)
    r = client.get(f"/transfer/workouts/{wid}.md")
    assert r.status_code == 200
    assert r.text.startswith("# Workout: Upper")
    assert r.headers["content-type"].startswith("text/markdown")
    assert client.get("/transfer/workouts/999.md").status_code == 404
    assert client.get("/transfer/workouts.md").text.startswith("# Workout History")
    assert "Exercise: Plank" in client.get("/transfer/exercises.md").text

def test_text_imports(client):
    text = "# Workout: Evening\n- Dip - Progression: \n  Sets: 2\n  Reps: 5\n"
    r = client.post("/transfer/import/workouts-text", content=text, headers={"Content-Type": "text/plain"})
    assert r.status_code == 200
    assert r.json()["created"] == {"workouts": 1, "workout_exercises": 1}

    lib = "Exercise: Human Flag\nCategory: core\nSubtype: isometric\n  - Tuck Flag (Goal: strength, Difficulty: 6/10)\n"
    r = client.post("/transfer/import/exercises-text", content=lib, headers={"Content-Type": "text/plain"})
    assert r.json()["created"] == {"exercises": 1, "progressions": 1}
    assert [e["name"] for e in client.get("/exercises", params={"search": "flag"}).json()] == ["Human Flag"]

def test_export_text_file(client, settings):
    r = client.post("/transfer/export-text-file", params={"kind": "library"})
    assert r.status_code == 200
    assert (settings.EXPORT_DIR / "exercise_db_export.md").exists()
    assert client.post("/transfer/export-text-file", params={"kind": "workout"}).status_code == 422
    assert client.post("/transfer/export-text-file", params={"kind": "workout", "workout_id": 999}).status_code == 404

def test_patch_with_null_required_field_is_422(client):
    wid = new_workout(client)
    we = add_block(client, wid)
    assert client.patch("/exercises/1", json={"name": None}).status_code == 422
    assert client.patch(f"/workout-exercises/{we}", json={"sets": None}).status_code == 422
    assert client.patch(f"/workouts/{wid}", json={"name": None}).status_code == 422
    assert client.patch("/progressions/1", json={"difficulty": None}).status_code == 422
    assert client.get("/exercises/1").json()["name"] == "Pull-up"

def test_patch_can_clear_nullable_field(client):
    wid = new_workout(client)
    client.patch(f"/workouts/{wid}", json={"goal": "strength"})
    r = client.patch(f"/workouts/{wid}", json={"goal": None})
    assert r.status_code == 200 and r.json()["goal"] is None

def test_import_with_missing_parent_writes_nothing(client):
    doc = {"workoutExercises": [{"id": 1, "workoutId": 99, "exerciseId": 1, "sets": 1}]}
    r = client.post("/transfer/import", content=json.dumps(doc))
    assert r.status_code == 404
    assert client.get("/workout-exercises/1").status_code == 404
