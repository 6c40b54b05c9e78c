"""Shared enums for models and API."""

from enum import Enum


class AuthFlow(str, Enum):
    """Which WebAuthn ceremony a challenge belongs to."""

    REGISTRATION = "registration"  # No user for the email yet
    AUTHENTICATION = "authentication"  # Returning user


class WorkoutStatus(str, Enum):
    """Workout-level state derived from timestamps and instance flags."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class InstanceState(str, Enum):
    """State of one exercise instance."""

    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"
