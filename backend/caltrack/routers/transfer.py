from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, Response
from caltrack.deps.store import get_app_settings, get_records
from caltrack.portability import exchange, text_export
from caltrack.record_store import RecordStore
from caltrack.schemas.exchange import ImportSummary
from caltrack.settings import Settings

router = APIRouter(prefix="/transfer", tags=["transfer"])

MARKDOWN = "text/markdown; charset=utf-8"

@router.get("/export")
async def export_store(records: RecordStore = Depends(get_records)):
    return Response(content=await exchange.export_json(records), media_type="application/json")

@router.post("/import", response_model=ImportSummary)
async def import_store(request: Request, records: RecordStore = Depends(get_records)):
    return await exchange.import_json(records, await request.body())

@router.post("/export-file")
async def export_file(records: RecordStore = Depends(get_records), settings: Settings = Depends(get_app_settings)):
    result = await exchange.export_to_file(records, settings.EXPORT_DIR)
    return {"path": str(result.path), "shared": result.shared}

@router.post("/export-text-file")
async def export_text_file(
    kind: text_export.TextKind = "history",
    workout_id: Optional[int] = None,
    records: RecordStore = Depends(get_records),
    settings: Settings = Depends(get_app_settings),
):
    if kind == "workout" and workout_id is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="workout_id is required")
    result = await text_export.export_text_to_file(records, settings.EXPORT_DIR, kind, workout_id=workout_id)
    return {"path": str(result.path), "shared": result.shared}

@router.get("/workouts.md", response_class=PlainTextResponse)
async def export_history(records: RecordStore = Depends(get_records)):
    return PlainTextResponse(await text_export.export_history_text(records), media_type=MARKDOWN)

@router.get("/workouts/{workout_id}.md", response_class=PlainTextResponse)
async def export_workout(workout_id: int, records: RecordStore = Depends(get_records)):
    return PlainTextResponse(await text_export.export_workout_text(records, workout_id), media_type=MARKDOWN)

@router.get("/exercises.md", response_class=PlainTextResponse)
async def export_library(records: RecordStore = Depends(get_records)):
    return PlainTextResponse(await text_export.export_exercise_library_text(records), media_type=MARKDOWN)

@router.post("/import/workouts-text", response_model=ImportSummary)
async def import_workouts(request: Request, records: RecordStore = Depends(get_records)):
    return await text_export.import_workouts_text(records, (await request.body()).decode("utf-8"))

@router.post("/import/exercises-text", response_model=ImportSummary)
async def import_library(request: Request, records: RecordStore = Depends(get_records)):
    return await text_export.import_exercise_library_text(records, (await request.body()).decode("utf-8"))
