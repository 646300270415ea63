"""
Human-readable text export / import.

Three dialects share one line format: a single workout, the whole workout
history, and the exercise library. Import is best-effort and lossy (weight,
notes, time and progression are not restored); the JSON exchange document is
the backup format.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from caltrack.errors import NotFoundError
from caltrack.record_store import RecordStore
from caltrack.repositories.exercise_repo import ExerciseRepository
from caltrack.repositories.progression_repo import ProgressionRepository
from caltrack.repositories.workout_exercise_repo import WorkoutExerciseRepository
from caltrack.repositories.workout_repo import WorkoutRepository
from caltrack.schemas.base import clean_name
from caltrack.schemas.exchange import ImportSummary
from caltrack.schemas.exercise import ExerciseRead
from caltrack.schemas.progression import ProgressionRead
from caltrack.schemas.workout import WorkoutRead
from caltrack.schemas.workout_exercise import WorkoutExerciseDetail
from caltrack.portability.files import ExportResult, ShareHook, write_and_share

log = logging.getLogger(__name__)

HISTORY_TITLE = "# Workout History"
LIBRARY_TITLE = "# Exercise Database"
PROGRESSION_MARKER = " - Progression: "

WORKOUT_HEADER_RE = re.compile(r"^#\s*Workout:\s*(.*)$")
EXERCISE_HEADER_RE = re.compile(r"^Exercise:\s*(.*)$")
PROGRESSION_LINE_RE = re.compile(r"^-\s+(.+?)\s+\(Goal:\s*(.*?),\s*Difficulty:\s*(\d+)(?:/10)?\)$")


def _one_line(value) -> str:
    if value is None:
        return ""
    return " ".join(str(value).splitlines()).strip()


def _num(value) -> str:
    if value is None or value == 0:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


# --------------------------------------------------------------------- render
def render_workout(workout: WorkoutRead, blocks: list[WorkoutExerciseDetail]) -> str:
    lines = [
        f"# Workout: {_one_line(workout.name)}",
        f"Date: {workout.created_at.date().isoformat()}",
        f"Goal: {_one_line(workout.goal)}",
        f"Comments: {_one_line(workout.comments)}",
    ]
    for b in blocks:
        progression = b.progression_id if b.progression_id is not None else ""
        lines += [
            f"- {_one_line(b.exercise_name)}{PROGRESSION_MARKER}{progression}",
            f"  Sets: {b.sets}",
            f"  Reps: {b.reps}",
            f"  Time: {_num(b.time_seconds)}",
            f"  Weight: {_num(b.weight)}",
            f"  Notes: {_one_line(b.notes)}",
        ]
    return "\n".join(lines) + "\n\n"


def render_history(entries: list[tuple[WorkoutRead, list[WorkoutExerciseDetail]]]) -> str:
    return f"{HISTORY_TITLE}\n\n" + "".join(render_workout(w, blocks) for w, blocks in entries)


def render_exercise_library(entries: list[tuple[ExerciseRead, list[ProgressionRead]]]) -> str:
    out = [f"{LIBRARY_TITLE}\n\n"]
    for ex, progressions in entries:
        lines = [
            f"Exercise: {_one_line(ex.name)}",
            f"Category: {_one_line(ex.category)}",
            f"Subtype: {_one_line(ex.subtype)}",
            f"Custom: {'Yes' if ex.is_custom else 'No'}",
        ]
        for p in progressions:
            lines.append(f"  - {_one_line(p.name)} (Goal: {_one_line(p.goal)}, Difficulty: {p.difficulty}/10)")
            lines.append(f"    {_one_line(p.description)}")
        out.append("\n".join(lines) + "\n\n")
    return "".join(out)


async def export_workout_text(records: RecordStore, workout_id: int) -> str:
    found = await records.workout_with_exercises(workout_id)
    if found is None:
        raise NotFoundError(f"workout {workout_id} not found")
    return render_workout(*found)


async def export_history_text(records: RecordStore) -> str:
    return render_history(await records.all_workouts_with_exercises())


async def export_exercise_library_text(records: RecordStore) -> str:
    return render_exercise_library(await records.exercise_library())


TextKind = Literal["workout", "history", "library"]


async def export_text_to_file(
    records: RecordStore,
    directory: Path,
    kind: TextKind,
    *,
    workout_id: Optional[int] = None,
    share: Optional[ShareHook] = None,
) -> ExportResult:
    if kind == "workout":
        if workout_id is None:
            raise ValueError("workout_id is required for a single-workout export")
        content = await export_workout_text(records, workout_id)
        filename = f"workout_{workout_id}_export.md"
    elif kind == "history":
        content = await export_history_text(records)
        filename = "workouts_export.md"
    else:
        content = await export_exercise_library_text(records)
        filename = "exercise_db_export.md"
    return await write_and_share(Path(directory) / filename, content, share)


# ---------------------------------------------------------------------- parse
@dataclass
class ParsedBlock:
    exercise_name: str
    sets: int = 1
    reps: int = 0


@dataclass
class ParsedWorkout:
    name: str
    goal: str = ""
    comments: str = ""
    blocks: list[ParsedBlock] = field(default_factory=list)


@dataclass
class ParsedProgression:
    name: str
    goal: str = ""
    difficulty: int = 1
    description: str = ""


@dataclass
class ParsedExercise:
    name: str
    category: str = ""
    subtype: str = ""
    progressions: list[ParsedProgression] = field(default_factory=list)


def _value(line: str, prefix: str) -> str:
    return line[len(prefix):].strip()


def _int(text: str, default: int) -> int:
    try:
        return int(text)
    except ValueError:
        return default


def parse_workouts_text(text: str) -> list[ParsedWorkout]:
    """Split on ``# Workout:`` headers and read each block's lines by prefix."""
    workouts: list[ParsedWorkout] = []
    current: ParsedWorkout | None = None
    block: ParsedBlock | None = None
    for raw in text.splitlines():
        line = raw.strip()
        m = WORKOUT_HEADER_RE.match(line)
        if m:
            current = ParsedWorkout(name=m.group(1).strip())
            workouts.append(current)
            block = None
            continue
        if current is None:
            continue
        if line.startswith("- "):
            name = line[2:].split(PROGRESSION_MARKER.rstrip(), 1)[0].strip()
            block = ParsedBlock(exercise_name=name)
            current.blocks.append(block)
        elif block is None and line.startswith("Goal:"):
            current.goal = _value(line, "Goal:")
        elif block is None and line.startswith("Comments:"):
            current.comments = _value(line, "Comments:")
        elif block is not None and line.startswith("Sets:"):
            block.sets = _int(_value(line, "Sets:"), 1)
        elif block is not None and line.startswith("Reps:"):
            block.reps = _int(_value(line, "Reps:"), 0)
    return workouts


def parse_exercise_library_text(text: str) -> list[ParsedExercise]:
    """Split on ``Exercise:`` headers; progression lines carry goal and difficulty."""
    exercises: list[ParsedExercise] = []
    current: ParsedExercise | None = None
    last: ParsedProgression | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        m = EXERCISE_HEADER_RE.match(line)
        if m:
            current = ParsedExercise(name=m.group(1).strip())
            exercises.append(current)
            last = None
            continue
        if current is None:
            continue
        pm = PROGRESSION_LINE_RE.match(line)
        if pm:
            last = ParsedProgression(
                name=pm.group(1).strip(),
                goal=pm.group(2).strip(),
                difficulty=min(max(int(pm.group(3)), 1), 10),
            )
            current.progressions.append(last)
        elif last is None and line.startswith("Category:"):
            current.category = _value(line, "Category:")
        elif last is None and line.startswith("Subtype:"):
            current.subtype = _value(line, "Subtype:")
        elif line.startswith("Custom:"):
            continue
        elif last is not None and not last.description:
            last.description = line
    return exercises


# --------------------------------------------------------------------- import
async def import_workouts_text(records: RecordStore, text: str) -> ImportSummary:
    """Create one workout per block; exercises are matched by normalised name."""
    summary = ImportSummary()
    parsed = parse_workouts_text(text)
    async with records.store.transaction() as db:
        exercises = ExerciseRepository(db)
        workouts = WorkoutRepository(db)
        blocks = WorkoutExerciseRepository(db)
        for pw in parsed:
            name = clean_name(pw.name)
            if not name:
                summary.bump("skipped", "workouts")
                continue
            w = await workouts.create(name=name, goal=pw.goal or None, comments=pw.comments or None)
            summary.bump("created", "workouts")
            for pb in pw.blocks:
                if not clean_name(pb.exercise_name):
                    summary.bump("skipped", "workout_exercises")
                    continue
                ex = await exercises.find_by_name(pb.exercise_name)
                if ex is None:
                    ex = await exercises.create(name=clean_name(pb.exercise_name), is_custom=True)
                    summary.bump("created", "exercises")
                await blocks.create(w.id, {
                    "exercise_id": ex.id,
                    "progression_id": None,
                    "sets": max(pb.sets, 1),
                    "reps": max(pb.reps, 0),
                    "time_seconds": 0,
                    "weight": None,
                    "notes": None,
                })
                summary.bump("created", "workout_exercises")
    log.info("Imported workouts text: %s", summary.created)
    return summary


async def import_exercise_library_text(records: RecordStore, text: str) -> ImportSummary:
    """Add exercises not already in the library, with their progression chains."""
    summary = ImportSummary()
    parsed = parse_exercise_library_text(text)
    async with records.store.transaction() as db:
        exercises = ExerciseRepository(db)
        progressions = ProgressionRepository(db)
        for pe in parsed:
            name = clean_name(pe.name)
            if not name or await exercises.find_by_name(name) is not None:
                summary.bump("skipped", "exercises")
                continue
            ex = await exercises.create(name=name, category=pe.category, subtype=pe.subtype, is_custom=True)
            summary.bump("created", "exercises")
            for pp in pe.progressions:
                await progressions.insert(
                    ex.id, name=pp.name, description=pp.description, goal=pp.goal, difficulty=pp.difficulty
                )
                summary.bump("created", "progressions")
    log.info("Imported exercise library text: created=%s skipped=%s", summary.created, summary.skipped)
    return summary
