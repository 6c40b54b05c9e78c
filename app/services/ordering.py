"""Exercise ordering within a program.

Positions under one program form 1..N. A move shifts the siblings between the
old and new slot by one and then drops the exercise into place; the range
updates and the point update share the request transaction, and the program
row is locked first so two reorders on one program cannot interleave.
Deleting an exercise leaves a gap; the next add still appends at max + 1.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidPosition
from app.models.exercise import Exercise
from app.models.program import Program
from app.schemas.exercise import ExerciseCreate

logger = logging.getLogger(__name__)


async def lock_program(db: AsyncSession, program_id) -> None:
    """Row lock on the program (no-op on SQLite, which serializes writers anyway)."""
    await db.execute(select(Program.id).where(Program.id == program_id).with_for_update())


async def next_position(db: AsyncSession, program_id) -> int:
    result = await db.execute(
        select(func.max(Exercise.position)).where(Exercise.program_id == program_id)
    )
    return (result.scalar() or 0) + 1


def clamp_position(new_position: int, sibling_count: int) -> int:
    """Clamp into [1, sibling_count]; below 1 is an error, not a clamp."""
    if new_position < 1:
        raise InvalidPosition(f"position must be at least 1, got {new_position}")
    return min(new_position, max(sibling_count, 1))


async def add_exercise(db: AsyncSession, program: Program, payload: ExerciseCreate) -> Exercise:
    """Append an exercise at max(position) + 1 (1 for an empty program)."""
    await lock_program(db, program.id)
    exercise = Exercise(
        program_id=program.id,
        position=await next_position(db, program.id),
        **payload.model_dump(),
    )
    db.add(exercise)
    await db.flush()
    return exercise


async def move_exercise(db: AsyncSession, exercise: Exercise, new_position: int) -> Exercise:
    """Move exercise to new_position, shifting the siblings in between by one slot."""
    if new_position < 1:
        raise InvalidPosition(f"position must be at least 1, got {new_position}")

    await lock_program(db, exercise.program_id)
    count = await db.execute(
        select(func.count(Exercise.id)).where(Exercise.program_id == exercise.program_id)
    )
    target = clamp_position(new_position, int(count.scalar() or 0))

    # Re-read under the lock; the loaded object may be stale
    current = await db.execute(select(Exercise.position).where(Exercise.id == exercise.id))
    old_position = current.scalar_one()
    if target == old_position:
        return exercise

    if target > old_position:
        stmt = (
            update(Exercise)
            .where(
                Exercise.program_id == exercise.program_id,
                Exercise.position > old_position,
                Exercise.position <= target,
            )
            .values(position=Exercise.position - 1)
        )
    else:
        stmt = (
            update(Exercise)
            .where(
                Exercise.program_id == exercise.program_id,
                Exercise.position >= target,
                Exercise.position < old_position,
            )
            .values(position=Exercise.position + 1)
        )
    await db.execute(stmt.execution_options(synchronize_session="fetch"))
    await db.execute(
        update(Exercise)
        .where(Exercise.id == exercise.id)
        .values(position=target)
        .execution_options(synchronize_session="fetch")
    )
    logger.debug("Moved exercise %s from %s to %s", exercise.id, old_position, target)
    return exercise


async def list_exercises(db: AsyncSession, program_id) -> list[Exercise]:
    result = await db.execute(
        select(Exercise).where(Exercise.program_id == program_id).order_by(Exercise.position)
    )
    return list(result.scalars().all())
