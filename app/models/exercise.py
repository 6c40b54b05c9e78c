"""Exercise model - one movement within a program, kept in a dense position order."""

from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import EXERCISE_NAME_MAX_LENGTH
from app.db.base import Base


class Exercise(Base):
    """Named exercise repeated repeat_count times per workout pass."""

    __tablename__ = "exercises"
    __table_args__ = (
        # Not unique: range shifts during a reorder collide row by row
        Index("ix_exercises_program_id_position", "program_id", "position"),
        CheckConstraint("repeat_count > 0", name="ck_exercises_repeat_count_positive"),
        CheckConstraint("position > 0", name="ck_exercises_position_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    program_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(EXERCISE_NAME_MAX_LENGTH), nullable=False)
    repeat_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    video_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)  # markdown
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    program: Mapped["Program"] = relationship("Program", back_populates="exercises")
