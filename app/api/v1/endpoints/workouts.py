"""Workout endpoints: start from a program, follow the instances, mark or skip them."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_user
from app.core.exceptions import InstanceNotFound, ResourceNotFound
from app.db.session import get_db
from app.models.user import User
from app.models.workout import Workout
from app.schemas.workout import WorkoutRead, WorkoutReadWithExercises, WorkoutStart
from app.services import progression as progression_service
from app.services.progression import WorkoutProgression
from app.services.snapshot import start_workout

router = APIRouter()


def _detail(progression: WorkoutProgression) -> WorkoutReadWithExercises:
    w = progression.workout
    return WorkoutReadWithExercises(
        id=w.id,
        user_id=w.user_id,
        program_id=w.program_id,
        program_title=w.program_title,
        started_at=w.started_at,
        completed_at=w.completed_at,
        created_at=w.created_at,
        status=progression.status,
        exercises=progression.instances,
        current_exercise=progression.current_exercise(),
        next_exercise=progression.next_exercise(),
        stats=progression.completion_stats(),
    )


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
    skip: int = 0,
    limit: int = 50,
):
    """The caller's workouts, newest first."""
    result = await db.execute(
        select(Workout)
        .where(Workout.user_id == user.id)
        .order_by(Workout.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


@router.post("", response_model=WorkoutReadWithExercises, status_code=201)
async def create_workout(
    payload: WorkoutStart,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Start a workout from a program (someone else's program is copied to the caller first)."""
    try:
        workout = await start_workout(db, user.id, payload.program_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Program not found")
    return _detail(WorkoutProgression(workout))


@router.get("/{workout_id}", response_model=WorkoutReadWithExercises)
async def get_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """Workout with status, current / next exercise and completion counts."""
    try:
        progression = await progression_service.load_progression(db, user.id, workout_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Workout not found")
    return _detail(progression)


@router.post("/{workout_id}/instances/{instance_id}/complete", response_model=WorkoutReadWithExercises)
async def mark_complete(
    workout_id: uuid.UUID,
    instance_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    try:
        progression = await progression_service.mark_complete(db, user.id, workout_id, instance_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Workout not found")
    except InstanceNotFound:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return _detail(progression)


@router.post("/{workout_id}/instances/{instance_id}/skip", response_model=WorkoutReadWithExercises)
async def skip(
    workout_id: uuid.UUID,
    instance_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    try:
        progression = await progression_service.skip(db, user.id, workout_id, instance_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Workout not found")
    except InstanceNotFound:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return _detail(progression)


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    try:
        workout = await progression_service.get_owned_workout(db, user.id, workout_id)
    except ResourceNotFound:
        raise HTTPException(status_code=404, detail="Workout not found")
    await db.delete(workout)
    return None
