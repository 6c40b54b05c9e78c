"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.exercise import Exercise
from app.models.program import Program
from app.models.user import Credential, User
from app.models.web_session import WebSession
from app.models.workout import Workout

__all__ = [
    "Credential",
    "Exercise",
    "Program",
    "User",
    "WebSession",
    "Workout",
]
