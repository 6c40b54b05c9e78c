"""Exercise update / delete / reorder endpoints (creation lives under programs)."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_user
from app.core.exceptions import InvalidPosition, ResourceNotFound
from app.db.session import get_db
from app.models.exercise import Exercise
from app.models.user import User
from app.schemas.exercise import ExerciseMove, ExerciseRead, ExerciseUpdate
from app.services.ordering import list_exercises, move_exercise
from app.services.programs import get_owned_exercise

router = APIRouter()


async def _owned_exercise(db: AsyncSession, user: User, exercise_id: uuid.UUID) -> Exercise:
    try:
        return await get_owned_exercise(db, user.id, exercise_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Exercise not found")


@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: uuid.UUID,
    payload: ExerciseUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Update an exercise (partial). Position changes go through /move."""
    exercise = await _owned_exercise(db, user, exercise_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in ("name", "repeat_count"):
            continue  # required columns
        setattr(exercise, k, v)
    await db.flush()
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Delete an exercise. Siblings keep their positions."""
    exercise = await _owned_exercise(db, user, exercise_id)
    await db.delete(exercise)
    return None


@router.patch("/{exercise_id}/move", response_model=list[ExerciseRead])
async def move(
    exercise_id: uuid.UUID,
    payload: ExerciseMove,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Move an exercise to a new position; returns the program's exercises in order."""
    exercise = await _owned_exercise(db, user, exercise_id)
    try:
        await move_exercise(db, exercise, payload.position)
    except InvalidPosition as e:
        raise HTTPException(status_code=400, detail=str(e))
    return await list_exercises(db, exercise.program_id)
