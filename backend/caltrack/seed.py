"""Idempotent loader for the built-in exercise catalog."""
from __future__ import annotations
import logging
from dataclasses import dataclass

from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from caltrack.db import Store
from caltrack.models import Exercise, Progression

log = logging.getLogger(__name__)

# Ids are the stable built-in keys: never renumber, only append.
BUILTIN_EXERCISES = [
    {"id": 1, "name": "Pull-up", "category": "pull-ups", "subtype": "dynamic"},
    {"id": 2, "name": "Push-up", "category": "push-ups", "subtype": "dynamic"},
    {"id": 3, "name": "Squat", "category": "legs", "subtype": "dynamic"},
    {"id": 4, "name": "Dip", "category": "push-ups", "subtype": "dynamic"},
    {"id": 5, "name": "Leg Raise", "category": "core", "subtype": "dynamic"},
    {"id": 6, "name": "Plank", "category": "core", "subtype": "isometric"},
]

# (id, exercise_id, name, description, goal, difficulty); chains are linked in list order
BUILTIN_PROGRESSIONS = [
    (1, 1, "Negative Pull-up", "Lowering phase only", "strength", 2),
    (2, 1, "Australian Pull-up", "Body at angle", "strength", 3),
    (3, 1, "Assisted Pull-up", "With band or partner", "strength", 4),
    (4, 1, "Standard Pull-up", "Full range", "strength", 6),
    (5, 1, "Archer Pull-up", "One arm assists", "strength", 8),
    (6, 1, "One-Arm Pull-up", "Advanced", "strength", 10),
    (7, 2, "Wall Push-up", "Standing, hands on a wall", "strength", 1),
    (8, 2, "Incline Push-up", "Hands on a bench", "strength", 2),
    (9, 2, "Knee Push-up", "Knees on the floor", "strength", 3),
    (10, 2, "Standard Push-up", "Full plank position", "strength", 5),
    (11, 2, "Archer Push-up", "One arm extended to the side", "strength", 7),
    (12, 2, "One-Arm Push-up", "Advanced", "strength", 10),
    (13, 3, "Assisted Squat", "Holding a support", "strength", 1),
    (14, 3, "Bodyweight Squat", "Full depth", "strength", 3),
    (15, 3, "Bulgarian Split Squat", "Rear foot elevated", "strength", 5),
    (16, 3, "Shrimp Squat", "Rear knee to the floor", "strength", 7),
    (17, 3, "Pistol Squat", "Single leg, full depth", "strength", 9),
    (18, 4, "Bench Dip", "Feet on the floor", "strength", 2),
    (19, 4, "Negative Dip", "Lowering phase only", "strength", 4),
    (20, 4, "Parallel Bar Dip", "Full range", "strength", 6),
    (21, 4, "Ring Dip", "Unstable rings", "strength", 8),
    (22, 5, "Knee Raise", "Lying, knees bent", "strength", 2),
    (23, 5, "Lying Leg Raise", "Legs straight", "strength", 4),
    (24, 5, "Hanging Knee Raise", "From a bar", "strength", 6),
    (25, 5, "Hanging Leg Raise", "Legs straight, from a bar", "strength", 8),
    (26, 6, "Knee Plank", "Forearms and knees", "endurance", 1),
    (27, 6, "Forearm Plank", "Straight body line", "endurance", 3),
    (28, 6, "Straight-Arm Plank", "Hands under shoulders", "endurance", 4),
    (29, 6, "Single-Leg Plank", "One foot raised", "endurance", 6),
]


def builtin_progression_rows() -> dict[int, list[dict]]:
    """Progression rows per exercise id, with prev/next links filled in."""
    by_exercise: dict[int, list[dict]] = {}
    for pid, exercise_id, name, description, goal, difficulty in BUILTIN_PROGRESSIONS:
        by_exercise.setdefault(exercise_id, []).append({
            "id": pid,
            "exercise_id": exercise_id,
            "name": name,
            "description": description,
            "goal": goal,
            "difficulty": difficulty,
        })
    for rows in by_exercise.values():
        for i, row in enumerate(rows):
            row["prev_progression_id"] = rows[i - 1]["id"] if i > 0 else None
            row["next_progression_id"] = rows[i + 1]["id"] if i + 1 < len(rows) else None
    return by_exercise


@dataclass
class SeedReport:
    exercises: int = 0
    progressions: int = 0


async def ensure_builtins(store: Store) -> SeedReport:
    """Insert catalog rows that are absent (keyed by id); existing rows are left alone.

    Progressions of a built-in are inserted only in the run that inserted the
    exercise itself, so a progression the user deleted is not put back into a
    chain that has been relinked without it.
    """
    report = SeedReport()
    chains = builtin_progression_rows()
    async with store.transaction() as db:
        for row in BUILTIN_EXERCISES:
            stmt = (
                sqlite_insert(Exercise)
                .values(**row, is_custom=False)
                .on_conflict_do_nothing(index_elements=["id"])
            )
            if (await db.execute(stmt)).rowcount == 0:
                continue
            report.exercises += 1
            for prow in chains.get(row["id"], []):
                pstmt = sqlite_insert(Progression).values(**prow).on_conflict_do_nothing(index_elements=["id"])
                report.progressions += (await db.execute(pstmt)).rowcount

    if report.exercises or report.progressions:
        log.info("Seeded %d built-in exercises, %d progressions", report.exercises, report.progressions)
    return report
