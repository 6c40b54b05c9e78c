"""Workout model - a session snapshotted from a program."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import PROGRAM_TITLE_MAX_LENGTH
from app.db.base import Base


class Workout(Base):
    """Unrolled exercise instances stored as a JSON list in exercises_data.

    Membership and order of the instances are fixed at creation; only the
    completed/skipped flags change afterwards.
    """

    __tablename__ = "workouts"
    __table_args__ = (Index("ix_workouts_user_id_created_at", "user_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    program_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("programs.id", ondelete="SET NULL"), nullable=True, index=True
    )
    program_title: Mapped[str] = mapped_column(String(PROGRAM_TITLE_MAX_LENGTH), nullable=False)
    exercises_data: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    user: Mapped["User"] = relationship("User", back_populates="workouts")
    program: Mapped["Program | None"] = relationship("Program", back_populates="workouts")
