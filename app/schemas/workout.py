"""Workout schemas and the exercise-instance value type stored in Workout.exercises_data."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.enums import InstanceState, WorkoutStatus


class ExerciseInstance(BaseModel):
    """One repetition slot of an exercise inside a workout.

    position is 1-based across the whole unrolled workout; repeat_instance is
    1-based within the exercise's repeat group of size repeat_total.
    """

    id: str
    name: str
    description: str | None = None
    video_url: str | None = None
    position: int
    repeat_instance: int
    repeat_total: int
    completed: bool = False
    skipped: bool = False

    @property
    def resolved(self) -> bool:
        return self.completed or self.skipped

    @property
    def state(self) -> InstanceState:
        if self.completed:
            return InstanceState.COMPLETED
        if self.skipped:
            return InstanceState.SKIPPED
        return InstanceState.PENDING


class CompletionStats(BaseModel):
    completed_count: int = 0
    skipped_count: int = 0
    total_count: int = 0


class WorkoutStart(BaseModel):
    program_id: UUID


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID
    program_id: UUID | None = None
    program_title: str
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime


class WorkoutReadWithExercises(WorkoutRead):
    """Workout detail with navigation pointers and counts."""

    status: WorkoutStatus
    exercises: list[ExerciseInstance] = []
    current_exercise: ExerciseInstance | None = None
    next_exercise: ExerciseInstance | None = None
    stats: CompletionStats
