"""Dashboard schema."""

from pydantic import BaseModel

from app.schemas.program import ProgramRead
from app.schemas.workout import WorkoutRead


class DashboardRead(BaseModel):
    programs: list[ProgramRead] = []
    workouts: list[WorkoutRead] = []
    has_more_programs: bool = False
    has_more_workouts: bool = False
