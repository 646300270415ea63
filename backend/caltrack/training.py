"""
Live training session.

Keeps the in-memory view of one workout being trained (which sets are done,
which block is shown, the rest countdown) and writes completions through the
RecordStore. The store logs every completion it is given; this class is the
caller that avoids submitting a set twice.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field

from caltrack.errors import ReferentialError
from caltrack.record_store import RecordStore
from caltrack.schemas.set_record import SetRecordCreate, SetRecordRead
from caltrack.schemas.workout_exercise import WorkoutExerciseDetail

log = logging.getLogger(__name__)


@dataclass
class RestTimer:
    """Countdown between sets. UI state only, nothing is persisted."""
    remaining: int = 0
    active: bool = False

    def start(self, seconds: int) -> None:
        self.remaining = max(0, int(seconds))
        self.active = self.remaining > 0

    def tick(self) -> bool:
        """Advance one second. Returns True when the rest just ran out."""
        if not self.active:
            return False
        self.remaining -= 1
        if self.remaining <= 0:
            self.remaining = 0
            self.active = False
            return True
        return False

    def stop(self) -> None:
        self.remaining = 0
        self.active = False


@dataclass
class TrainingSession:
    records: RecordStore
    workout_id: int
    blocks: list[WorkoutExerciseDetail] = field(default_factory=list)
    completed: dict[int, set[int]] = field(default_factory=dict)
    current_index: int = 0
    rest: RestTimer = field(default_factory=RestTimer)

    async def start(self) -> "TrainingSession":
        """Load the workout's blocks and what was already completed.

        Calling it again (re-entering the screen) rebuilds the state from the
        store, so sets logged earlier are shown as done.
        """
        if await self.records.get_workout(self.workout_id) is None:
            raise ReferentialError("workout", self.workout_id)
        self.blocks = await self.records.list_workout_exercises_for_workout(self.workout_id)
        self.completed = {}
        for block in self.blocks:
            done = {s.set_number for s in await self.records.list_set_records(block.id) if s.completed}
            self.completed[block.id] = done
        self.current_index = min(self.current_index, max(len(self.blocks) - 1, 0))
        return self

    @property
    def current(self) -> WorkoutExerciseDetail | None:
        if not self.blocks:
            return None
        return self.blocks[self.current_index]

    def next_exercise(self) -> WorkoutExerciseDetail | None:
        if self.current_index + 1 < len(self.blocks):
            self.current_index += 1
        return self.current

    def previous_exercise(self) -> WorkoutExerciseDetail | None:
        if self.current_index > 0:
            self.current_index -= 1
        return self.current

    def _block(self, workout_exercise_id: int) -> WorkoutExerciseDetail:
        for b in self.blocks:
            if b.id == workout_exercise_id:
                return b
        raise ReferentialError("workout exercise", workout_exercise_id)

    def is_complete(self, workout_exercise_id: int, set_number: int) -> bool:
        return set_number in self.completed.get(workout_exercise_id, set())

    def completed_sets(self, workout_exercise_id: int) -> list[int]:
        return sorted(self.completed.get(workout_exercise_id, set()))

    def remaining_sets(self, workout_exercise_id: int) -> list[int]:
        block = self._block(workout_exercise_id)
        return [n for n in range(1, block.sets + 1) if not self.is_complete(workout_exercise_id, n)]

    async def complete_set(self, workout_exercise_id: int, set_number: int) -> SetRecordRead | None:
        """Log one completed set; None when this session already shows it done.

        The in-memory state changes only after the write committed, so a
        failure leaves the set shown as not completed and the call can be
        retried.
        """
        self._block(workout_exercise_id)
        if self.is_complete(workout_exercise_id, set_number):
            return None
        record = await self.records.record_set(workout_exercise_id, SetRecordCreate(set_number=set_number))
        self.completed.setdefault(workout_exercise_id, set()).add(set_number)
        self.rest.stop()
        log.debug("Set %s of block %s completed", set_number, workout_exercise_id)
        return record

    async def add_set(self, workout_exercise_id: int) -> int:
        """Grow the planned set count by one; returns the new count."""
        block = self._block(workout_exercise_id)
        if await self.records.increment_planned_sets(workout_exercise_id) == 0:
            raise ReferentialError("workout exercise", workout_exercise_id)
        fresh = await self.records.get_workout_exercise(workout_exercise_id)
        idx = self.blocks.index(block)
        self.blocks[idx] = block.model_copy(update={"sets": fresh.sets})
        return fresh.sets

    def start_rest(self, seconds: int) -> None:
        self.rest.start(seconds)

    @property
    def finished(self) -> bool:
        return bool(self.blocks) and all(not self.remaining_sets(b.id) for b in self.blocks)
