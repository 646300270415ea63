from fastapi import APIRouter, Depends, HTTPException, Response, status
from caltrack.deps.store import get_records, require_rows
from caltrack.record_store import RecordStore
from caltrack.schemas.progression import ProgressionRead, ProgressionUpdate

router = APIRouter(prefix="/progressions", tags=["progressions"])

@router.get("/{progression_id}", response_model=ProgressionRead)
async def get_progression(progression_id: int, records: RecordStore = Depends(get_records)):
    p = await records.get_progression(progression_id)
    if not p:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Progression not found")
    return p

@router.patch("/{progression_id}", response_model=ProgressionRead)
async def update_progression(
    progression_id: int, payload: ProgressionUpdate, records: RecordStore = Depends(get_records)
):
    require_rows(await records.update_progression(progression_id, payload), "Progression")
    return await records.get_progression(progression_id)

@router.delete("/{progression_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_progression(progression_id: int, records: RecordStore = Depends(get_records)):
    require_rows(await records.delete_progression(progression_id), "Progression")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
