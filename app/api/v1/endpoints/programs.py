"""Program CRUD endpoints. Any visitor may view a program; only the owner may change it."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_user
from app.core.exceptions import ResourceNotFound
from app.db.session import get_db
from app.models.program import Program
from app.models.user import User
from app.schemas.exercise import ExerciseCreate, ExerciseRead
from app.schemas.program import (
    ProgramCreate,
    ProgramRead,
    ProgramReadWithExercises,
    ProgramUpdate,
)
from app.services.ordering import add_exercise
from app.services.programs import duplicate_program, get_owned_program, get_program

router = APIRouter()


def _detail(program: Program, user: User | None) -> ProgramReadWithExercises:
    return ProgramReadWithExercises(
        id=program.id,
        user_id=program.user_id,
        title=program.title,
        description=program.description,
        created_at=program.created_at,
        exercises=[ExerciseRead.model_validate(e) for e in program.exercises],
        is_owner=user is not None and user.id == program.user_id,
    )


@router.get("", response_model=list[ProgramRead])
async def list_programs(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
    skip: int = 0,
    limit: int = 50,
):
    """The caller's programs, newest first."""
    result = await db.execute(
        select(Program)
        .where(Program.user_id == user.id)
        .order_by(Program.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


@router.post("", response_model=ProgramRead, status_code=201)
async def create_program(
    payload: ProgramCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    program = Program(user_id=user.id, **payload.model_dump())
    db.add(program)
    await db.flush()
    await db.refresh(program)
    return program


@router.get("/{program_id}", response_model=ProgramReadWithExercises)
async def show_program(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_current_user),
):
    """Public view of a program with its exercises in position order."""
    try:
        program = await get_program(db, program_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Program not found")
    return _detail(program, user)


@router.patch("/{program_id}", response_model=ProgramReadWithExercises)
async def update_program(
    program_id: uuid.UUID,
    payload: ProgramUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    try:
        program = await get_owned_program(db, user.id, program_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Program not found")
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(program, k, v)
    await db.flush()
    return _detail(program, user)


@router.delete("/{program_id}", status_code=204)
async def delete_program(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Delete a program and its exercises. Workouts started from it keep their snapshot."""
    try:
        program = await get_owned_program(db, user.id, program_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Program not found")
    await db.delete(program)
    return None


@router.post("/{program_id}/duplicate", response_model=ProgramReadWithExercises, status_code=201)
async def duplicate(
    program_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Save a copy of any program (exercises included) to the caller's library."""
    try:
        program = await get_program(db, program_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Program not found")
    copy = await duplicate_program(db, program, user.id)
    return _detail(copy, user)


@router.post("/{program_id}/exercises", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    program_id: uuid.UUID,
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Append an exercise to the end of the program."""
    try:
        program = await get_owned_program(db, user.id, program_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Program not found")
    return await add_exercise(db, program, payload)
