from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from caltrack.deps.store import get_records, require_rows
from caltrack.record_store import RecordStore
from caltrack.schemas.exercise import ExerciseCreate, ExerciseFilter, ExerciseRead, ExerciseUpdate
from caltrack.schemas.progression import ProgressionCreate, ProgressionRead

router = APIRouter(prefix="/exercises", tags=["exercises"])

@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    search: Optional[str] = Query(None, max_length=120),
    category: Optional[str] = None,
    subtype: Optional[str] = None,
    records: RecordStore = Depends(get_records),
):
    return await records.list_exercises(ExerciseFilter(search=search, category=category, subtype=subtype))

# static paths before /exercises/{exercise_id}
@router.get("/categories", response_model=list[str])
async def list_categories(records: RecordStore = Depends(get_records)):
    return await records.list_categories()

@router.get("/subtypes", response_model=list[str])
async def list_subtypes(category: Optional[str] = None, records: RecordStore = Depends(get_records)):
    return await records.list_subtypes(category)

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
async def create_exercise(payload: ExerciseCreate, records: RecordStore = Depends(get_records)):
    return await records.create_exercise(payload)

@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(exercise_id: int, records: RecordStore = Depends(get_records)):
    ex = await records.get_exercise(exercise_id)
    if not ex:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    return ex

@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(exercise_id: int, payload: ExerciseUpdate, records: RecordStore = Depends(get_records)):
    require_rows(await records.update_exercise(exercise_id, payload), "Exercise")
    return await records.get_exercise(exercise_id)

@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(exercise_id: int, records: RecordStore = Depends(get_records)):
    require_rows(await records.delete_exercise(exercise_id), "Exercise")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{exercise_id}/progressions", response_model=list[ProgressionRead])
async def list_progressions(exercise_id: int, records: RecordStore = Depends(get_records)):
    return await records.list_progressions_for_exercise(exercise_id)

@router.post("/{exercise_id}/progressions", response_model=ProgressionRead, status_code=status.HTTP_201_CREATED)
async def add_progression(exercise_id: int, payload: ProgressionCreate, records: RecordStore = Depends(get_records)):
    # the path wins over any exerciseId in the body
    return await records.create_progression(payload.model_copy(update={"exercise_id": exercise_id}))

@router.get("/{exercise_id}/chain", response_model=list[ProgressionRead])
async def progression_chain(exercise_id: int, records: RecordStore = Depends(get_records)):
    return await records.progression_chain(exercise_id)
