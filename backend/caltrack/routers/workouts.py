from fastapi import APIRouter, Depends, HTTPException, Response, status
from caltrack.deps.store import get_records, require_rows
from caltrack.record_store import RecordStore
from caltrack.schemas.workout import WorkoutCreate, WorkoutRead, WorkoutUpdate
from caltrack.schemas.workout_exercise import (
    WorkoutExerciseCreate,
    WorkoutExerciseDetail,
    WorkoutExerciseRead,
    WorkoutExerciseUpdate,
)

router = APIRouter(tags=["workouts"])

@router.get("/workouts", response_model=list[WorkoutRead])
async def list_workouts(records: RecordStore = Depends(get_records)):
    return await records.list_workouts()

@router.post("/workouts", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
async def create_workout(payload: WorkoutCreate, records: RecordStore = Depends(get_records)):
    return await records.create_workout(payload)

@router.get("/workouts/{workout_id}", response_model=WorkoutRead)
async def get_workout(workout_id: int, records: RecordStore = Depends(get_records)):
    w = await records.get_workout(workout_id)
    if not w:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout not found")
    return w

@router.patch("/workouts/{workout_id}", response_model=WorkoutRead)
async def update_workout(workout_id: int, payload: WorkoutUpdate, records: RecordStore = Depends(get_records)):
    require_rows(await records.update_workout(workout_id, payload), "Workout")
    return await records.get_workout(workout_id)

@router.delete("/workouts/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout(workout_id: int, records: RecordStore = Depends(get_records)):
    require_rows(await records.delete_workout(workout_id), "Workout")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/workouts/{workout_id}/exercises", response_model=list[WorkoutExerciseDetail])
async def list_workout_exercises(workout_id: int, records: RecordStore = Depends(get_records)):
    return await records.list_workout_exercises_for_workout(workout_id)

@router.post("/workouts/{workout_id}/exercises", response_model=WorkoutExerciseRead,
             status_code=status.HTTP_201_CREATED)
async def add_workout_exercise(
    workout_id: int, payload: WorkoutExerciseCreate, records: RecordStore = Depends(get_records)
):
    return await records.add_workout_exercise(workout_id, payload)

@router.get("/workout-exercises/{workout_exercise_id}", response_model=WorkoutExerciseRead)
async def get_workout_exercise(workout_exercise_id: int, records: RecordStore = Depends(get_records)):
    we = await records.get_workout_exercise(workout_exercise_id)
    if not we:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout exercise not found")
    return we

@router.patch("/workout-exercises/{workout_exercise_id}", response_model=WorkoutExerciseRead)
async def update_workout_exercise(
    workout_exercise_id: int, payload: WorkoutExerciseUpdate, records: RecordStore = Depends(get_records)
):
    require_rows(await records.update_workout_exercise(workout_exercise_id, payload), "Workout exercise")
    return await records.get_workout_exercise(workout_exercise_id)

@router.delete("/workout-exercises/{workout_exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout_exercise(workout_exercise_id: int, records: RecordStore = Depends(get_records)):
    require_rows(await records.delete_workout_exercise(workout_exercise_id), "Workout exercise")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/workout-exercises/{workout_exercise_id}/increment-sets", response_model=WorkoutExerciseRead)
async def increment_sets(workout_exercise_id: int, records: RecordStore = Depends(get_records)):
    require_rows(await records.increment_planned_sets(workout_exercise_id), "Workout exercise")
    return await records.get_workout_exercise(workout_exercise_id)
