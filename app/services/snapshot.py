"""Workout snapshots: unroll a program's exercises into exercise instances."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import generate_instance_id
from app.models.exercise import Exercise
from app.models.program import Program
from app.models.workout import Workout
from app.schemas.workout import ExerciseInstance
from app.services.programs import duplicate_program, get_program

logger = logging.getLogger(__name__)


def build_instances(
    exercises: Iterable[Exercise],
    id_factory: Callable[[], str] = generate_instance_id,
) -> list[ExerciseInstance]:
    """
    Emit repeat_count instances per exercise in ascending position order.
    Position runs across the whole workout; repeat_instance restarts per exercise.
    Same exercises in, same content out; only the instance ids differ.
    """
    instances: list[ExerciseInstance] = []
    position = 0
    for exercise in sorted(exercises, key=lambda e: e.position):
        repeat_count = exercise.repeat_count or 1
        for repeat_index in range(repeat_count):
            position += 1
            instances.append(
                ExerciseInstance(
                    id=id_factory(),
                    name=exercise.name,
                    description=exercise.description,
                    video_url=exercise.video_url,
                    position=position,
                    repeat_instance=repeat_index + 1,
                    repeat_total=repeat_count,
                )
            )
    return instances


def build_workout(
    program: Program,
    user_id: uuid.UUID,
    id_factory: Callable[[], str] = generate_instance_id,
) -> Workout:
    """New (unsaved) workout holding a snapshot of program. program.exercises must be loaded."""
    instances = build_instances(program.exercises, id_factory)
    return Workout(
        user_id=user_id,
        program_id=program.id,
        program_title=program.title,
        exercises_data=[i.model_dump() for i in instances],
    )


async def build_snapshot(db: AsyncSession, program_id: uuid.UUID) -> list[ExerciseInstance]:
    program = await get_program(db, program_id)
    return build_instances(program.exercises)


async def start_workout(db: AsyncSession, user_id: uuid.UUID, program_id: uuid.UUID) -> Workout:
    """Start a workout for user_id. Someone else's program is copied into the user's library first."""
    program = await get_program(db, program_id)
    if program.user_id != user_id:
        program = await duplicate_program(db, program, user_id)
        logger.info("Copied program %s to %s for user %s", program_id, program.id, user_id)
    workout = build_workout(program, user_id)
    db.add(workout)
    await db.flush()
    return workout
