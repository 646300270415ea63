from fastapi import APIRouter, Depends, status
from caltrack.deps.store import get_records
from caltrack.record_store import RecordStore
from caltrack.schemas.set_record import SetRecordCreate, SetRecordRead

router = APIRouter(prefix="/workout-exercises", tags=["training"])

@router.get("/{workout_exercise_id}/sets", response_model=list[SetRecordRead])
async def list_sets(workout_exercise_id: int, records: RecordStore = Depends(get_records)):
    return await records.list_set_records(workout_exercise_id)

@router.post("/{workout_exercise_id}/sets", response_model=SetRecordRead, status_code=status.HTTP_201_CREATED)
async def complete_set(workout_exercise_id: int, payload: SetRecordCreate, records: RecordStore = Depends(get_records)):
    # Every call appends a row; the client tracks which sets it already sent
    return await records.record_set(workout_exercise_id, payload)
