"""Dashboard: recent programs and workouts for the signed-in user."""

from fastapi import APIRouter, Depends
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_user
from app.core.constants import DASHBOARD_RECENT_LIMIT
from app.db.session import get_db
from app.models.program import Program
from app.models.user import User
from app.models.workout import Workout
from app.schemas.dashboard import DashboardRead
from app.schemas.program import ProgramRead
from app.schemas.workout import WorkoutRead

router = APIRouter()


@router.get("", response_model=DashboardRead)
async def dashboard(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_user),
):
    """
    Programs the user created or has worked out from, most recently used first
    (never-used last), plus the latest workouts. One extra row is fetched to
    tell whether a "view all" link is needed.
    """
    fetch = DASHBOARD_RECENT_LIMIT + 1
    last_workout_at = func.max(Workout.created_at)
    result = await db.execute(
        select(Program)
        .outerjoin(Workout, and_(Workout.program_id == Program.id, Workout.user_id == user.id))
        .where(or_(Program.user_id == user.id, Workout.user_id == user.id))
        .group_by(Program.id)
        .order_by(last_workout_at.desc().nulls_last(), Program.created_at.desc())
        .limit(fetch)
    )
    programs = list(result.scalars().all())

    result = await db.execute(
        select(Workout)
        .where(Workout.user_id == user.id)
        .order_by(Workout.created_at.desc())
        .limit(fetch)
    )
    workouts = list(result.scalars().all())

    return DashboardRead(
        programs=[ProgramRead.model_validate(p) for p in programs[:DASHBOARD_RECENT_LIMIT]],
        workouts=[WorkoutRead.model_validate(w) for w in workouts[:DASHBOARD_RECENT_LIMIT]],
        has_more_programs=len(programs) > DASHBOARD_RECENT_LIMIT,
        has_more_workouts=len(workouts) > DASHBOARD_RECENT_LIMIT,
    )
