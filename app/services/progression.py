"""Workout progression: per-instance completed/skipped flags and session timestamps.

An instance is pending until it is completed or skipped; the two flags are
mutually exclusive and either one may replace the other. started_at is set by
the first action and never moved. completed_at is set whenever an action
leaves every instance resolved, so a later flip on a finished workout
refreshes it.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import WorkoutStatus
from app.core.exceptions import InstanceNotFound, ResourceNotFound
from app.models.workout import Workout
from app.schemas.workout import CompletionStats, ExerciseInstance


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutProgression:
    """State machine over one workout's exercise instances."""

    def __init__(self, workout: Workout, clock: Callable[[], datetime] = utcnow):
        self.workout = workout
        self.clock = clock
        self.instances = [ExerciseInstance.model_validate(d) for d in workout.exercises_data or []]

    # Queries

    def find_instance(self, instance_id: str) -> ExerciseInstance | None:
        for instance in self.instances:
            if instance.id == instance_id:
                return instance
        return None

    def find_instance_by_index(self, index: int) -> ExerciseInstance | None:
        if index < 0 or index >= len(self.instances):
            return None
        return self.instances[index]

    def current_exercise(self) -> ExerciseInstance | None:
        """First pending instance in sequence order."""
        for instance in self.instances:
            if not instance.resolved:
                return instance
        return None

    def next_exercise(self) -> ExerciseInstance | None:
        """First pending instance after the current one."""
        current = self.current_exercise()
        if current is None:
            return None
        index = self.instances.index(current)
        for instance in self.instances[index + 1:]:
            if not instance.resolved:
                return instance
        return None

    def completion_stats(self) -> CompletionStats:
        return CompletionStats(
            completed_count=sum(1 for i in self.instances if i.completed),
            skipped_count=sum(1 for i in self.instances if i.skipped),
            total_count=len(self.instances),
        )

    def is_complete(self) -> bool:
        # An empty workout is never complete
        if not self.instances:
            return False
        return all(i.resolved for i in self.instances)

    @property
    def status(self) -> WorkoutStatus:
        if self.is_complete():
            return WorkoutStatus.COMPLETE
        if self.workout.started_at is not None:
            return WorkoutStatus.IN_PROGRESS
        return WorkoutStatus.NOT_STARTED

    # Transitions

    def mark_complete(self, instance_id: str) -> ExerciseInstance:
        return self._resolve(instance_id, completed=True)

    def skip(self, instance_id: str) -> ExerciseInstance:
        return self._resolve(instance_id, completed=False)

    def _resolve(self, instance_id: str, completed: bool) -> ExerciseInstance:
        instance = self.find_instance(instance_id)
        if instance is None:
            raise InstanceNotFound(f"Exercise instance {instance_id} not in workout {self.workout.id}")

        instance.completed = completed
        instance.skipped = not completed

        now = self.clock()
        if self.workout.started_at is None:
            self.workout.started_at = now
        if self.is_complete():
            self.workout.completed_at = now

        # Reassign so the JSON column is flagged dirty
        self.workout.exercises_data = [i.model_dump() for i in self.instances]
        return instance


async def get_owned_workout(db: AsyncSession, user_id: uuid.UUID, workout_id: uuid.UUID) -> Workout:
    """Workout owned by user_id; anything else is reported as missing."""
    result = await db.execute(
        select(Workout).where(Workout.id == workout_id, Workout.user_id == user_id)
    )
    workout = result.scalar_one_or_none()
    if workout is None:
        raise ResourceNotFound("Workout not found")
    return workout


async def load_progression(db: AsyncSession, user_id: uuid.UUID, workout_id: uuid.UUID) -> WorkoutProgression:
    return WorkoutProgression(await get_owned_workout(db, user_id, workout_id))


async def mark_complete(
    db: AsyncSession, user_id: uuid.UUID, workout_id: uuid.UUID, instance_id: str
) -> WorkoutProgression:
    progression = await load_progression(db, user_id, workout_id)
    progression.mark_complete(instance_id)
    await db.flush()
    return progression


async def skip(
    db: AsyncSession, user_id: uuid.UUID, workout_id: uuid.UUID, instance_id: str
) -> WorkoutProgression:
    progression = await load_progression(db, user_id, workout_id)
    progression.skip(instance_id)
    await db.flush()
    return progression
