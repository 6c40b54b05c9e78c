"""Exercise schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from app.core.constants import EXERCISE_NAME_MAX_LENGTH


_http_url = TypeAdapter(HttpUrl)


def _check_video_url(value: str | None) -> str | None:
    """Blank means no video; anything else must be an http(s) URL with a host."""
    if value is None or not value.strip():
        return None
    try:
        return str(_http_url.validate_python(value.strip()))
    except ValidationError as e:
        raise ValueError("must be a valid URL") from e


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=EXERCISE_NAME_MAX_LENGTH)
    repeat_count: int = Field(..., gt=0)
    video_url: str | None = None
    description: str | None = None

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v: str | None) -> str | None:
        return _check_video_url(v)


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=EXERCISE_NAME_MAX_LENGTH)
    repeat_count: int | None = Field(None, gt=0)
    video_url: str | None = None
    description: str | None = None

    @field_validator("video_url")
    @classmethod
    def validate_video_url(cls, v: str | None) -> str | None:
        return _check_video_url(v)


class ExerciseMove(BaseModel):
    """Target position; values below 1 are rejected by the ordering service."""

    position: int


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    program_id: UUID
    position: int
