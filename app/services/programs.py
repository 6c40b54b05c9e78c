"""Program lookups, ownership checks and duplication."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ResourceNotFound
from app.models.exercise import Exercise
from app.models.program import Program


async def get_program(db: AsyncSession, program_id: uuid.UUID) -> Program:
    """Any program by id, exercises loaded in position order (programs are publicly viewable)."""
    result = await db.execute(
        select(Program).where(Program.id == program_id).options(selectinload(Program.exercises))
    )
    program = result.scalar_one_or_none()
    if program is None:
        raise ResourceNotFound("Program not found")
    return program


async def get_owned_program(db: AsyncSession, user_id: uuid.UUID, program_id: uuid.UUID) -> Program:
    """Program owned by user_id; someone else's program is reported as missing."""
    program = await get_program(db, program_id)
    if program.user_id != user_id:
        raise ResourceNotFound("Program not found")
    return program


async def get_owned_exercise(db: AsyncSession, user_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise:
    result = await db.execute(
        select(Exercise)
        .join(Program, Program.id == Exercise.program_id)
        .where(Exercise.id == exercise_id, Program.user_id == user_id)
    )
    exercise = result.scalar_one_or_none()
    if exercise is None:
        raise ResourceNotFound("Exercise not found")
    return exercise


async def duplicate_program(db: AsyncSession, program: Program, owner_id: uuid.UUID) -> Program:
    """Copy program and all its exercises (positions kept) into owner_id's library.

    program.exercises must already be loaded.
    """
    copy = Program(
        user_id=owner_id,
        title=program.title,
        description=program.description,
        exercises=[
            Exercise(
                name=e.name,
                repeat_count=e.repeat_count,
                video_url=e.video_url,
                description=e.description,
                position=e.position,
            )
            for e in sorted(program.exercises, key=lambda e: e.position)
        ],
    )
    db.add(copy)
    await db.flush()
    return copy
