"""
Full-store exchange document (backup / restore).

Export reads the five tables in one snapshot. Import validates the whole
document before touching the database, then upserts by id in dependency
order inside one transaction: a bad document writes nothing.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from caltrack.errors import ParseError, ReferentialError
from caltrack.record_store import RecordStore
from caltrack.repositories.exercise_repo import ExerciseRepository
from caltrack.repositories.progression_repo import ProgressionRepository
from caltrack.repositories.set_repo import SetRepository
from caltrack.repositories.workout_exercise_repo import WorkoutExerciseRepository
from caltrack.repositories.workout_repo import WorkoutRepository
from caltrack.schemas.exchange import ExchangeDocument, ImportDocument, ImportSummary
from caltrack.schemas.exercise import ExerciseRead
from caltrack.schemas.progression import ProgressionRead
from caltrack.schemas.set_record import SetRecordRead
from caltrack.schemas.workout import WorkoutRead
from caltrack.schemas.workout_exercise import WorkoutExerciseRead
from caltrack.portability.files import ExportResult, ShareHook, write_and_share

log = logging.getLogger(__name__)

EXPORT_FILENAME = "calisthenics_export.json"

# Document key -> (repository, record schema), parents before children:
# importing in this order never lands a row before what it references.
TABLES = {
    "exercises": (ExerciseRepository, ExerciseRead),
    "progressions": (ProgressionRepository, ProgressionRead),
    "workouts": (WorkoutRepository, WorkoutRead),
    "workout_exercises": (WorkoutExerciseRepository, WorkoutExerciseRead),
    "sets": (SetRepository, SetRecordRead),
}


async def export_document(records: RecordStore) -> ExchangeDocument:
    async with records.store.snapshot() as db:
        data = {}
        for key, (repo_cls, schema) in TABLES.items():
            data[key] = [schema.model_validate(row) for row in await repo_cls(db).list_all()]
    return ExchangeDocument(**data)


async def export_json(records: RecordStore) -> str:
    doc = await export_document(records)
    return doc.model_dump_json(by_alias=True, indent=2)


def parse_document(text: str | bytes) -> ExchangeDocument:
    try:
        return ImportDocument.model_validate_json(text)
    except ValidationError as e:
        raise ParseError(f"invalid export document: {e.error_count()} error(s); {e.errors()[0]['msg']}") from e


async def _check_parents(db, doc: ExchangeDocument) -> None:
    """Every imported row must land on parents that exist once the upserts are done.

    A workout exercise may keep the id of a deleted exercise: the store itself
    produces that state (see RecordStore.delete_exercise) and exports it.
    """
    exercises = ExerciseRepository(db)
    progressions = ProgressionRepository(db)
    workouts = WorkoutRepository(db)
    blocks = WorkoutExerciseRepository(db)
    for p in doc.progressions or []:
        if not await exercises.exists(p.exercise_id):
            raise ReferentialError("exercise", p.exercise_id)
    for we in doc.workout_exercises or []:
        if not await workouts.exists(we.workout_id):
            raise ReferentialError("workout", we.workout_id)
        if we.progression_id is not None and not await progressions.exists(we.progression_id):
            raise ReferentialError("progression", we.progression_id)
    for s in doc.sets or []:
        if not await blocks.exists(s.workout_exercise_id):
            raise ReferentialError("workout exercise", s.workout_exercise_id)


async def import_document(records: RecordStore, doc: ExchangeDocument) -> ImportSummary:
    summary = ImportSummary()
    async with records.store.transaction() as db:
        for key, (repo_cls, _) in TABLES.items():
            rows = getattr(doc, key)
            if rows is None:
                continue
            repo = repo_cls(db)
            for row in rows:
                created = await repo.upsert(row.model_dump())
                summary.bump("created" if created else "updated", key)
        await _check_parents(db, doc)
        if doc.progressions:
            progs = ProgressionRepository(db)
            for exercise_id in sorted({p.exercise_id for p in doc.progressions}):
                await progs.chain(exercise_id)
    log.info("Imported document: created=%s updated=%s", summary.created, summary.updated)
    return summary


async def import_json(records: RecordStore, text: str | bytes) -> ImportSummary:
    """Parse then merge. Missing top-level keys leave their tables untouched."""
    return await import_document(records, parse_document(text))


async def export_to_file(
    records: RecordStore, directory: Path, share: Optional[ShareHook] = None
) -> ExportResult:
    content = await export_json(records)
    return await write_and_share(Path(directory) / EXPORT_FILENAME, content, share)
