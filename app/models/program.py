"""Program model - a user's ordered template of exercises."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.constants import PROGRAM_TITLE_MAX_LENGTH
from app.db.base import Base


class Program(Base):
    """Owned by a user; exercises are kept in position order."""

    __tablename__ = "programs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(PROGRAM_TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)  # markdown
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    user: Mapped["User"] = relationship("User", back_populates="programs")
    exercises: Mapped[list["Exercise"]] = relationship(
        "Exercise",
        back_populates="program",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Exercise.position",
    )
    # Workouts outlive the program: FK is SET NULL, so no ORM cascade here
    workouts: Mapped[list["Workout"]] = relationship(
        "Workout", back_populates="program", passive_deletes=True
    )
