"""Program schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import PROGRAM_TITLE_MAX_LENGTH
from app.schemas.exercise import ExerciseRead


class ProgramBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=PROGRAM_TITLE_MAX_LENGTH)
    description: str | None = None


class ProgramCreate(ProgramBase):
    pass


class ProgramUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=PROGRAM_TITLE_MAX_LENGTH)
    description: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: str | None) -> str:
        # Omit title to keep it; an explicit null would clear a required column
        if v is None:
            raise ValueError("title cannot be null")
        return v


class ProgramRead(ProgramBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID
    created_at: datetime


class ProgramReadWithExercises(ProgramRead):
    """Program detail; is_owner tells a visitor whether they may edit it."""

    exercises: list[ExerciseRead] = []
    is_owner: bool = False
