"""Domain models for riding lessons."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from uuid import UUID


class LessonState(StrEnum):
    """Derived lifecycle state of a lesson."""

    FUTURE_UNASSIGNED = "future-unassigned"
    FUTURE_ASSIGNED = "future-assigned"
    PAST = "past"


@dataclass(frozen=True)
class Lesson:
    """Represents one scheduled riding session."""

    id: UUID
    name: str
    description: str | None
    scheduled_start: datetime
    duration: int
    image_ref: str | None
    assigned_riders: frozenset[str]
    created_at: datetime
    updated_at: datetime

    @property
    def scheduled_end(self) -> datetime:
        """Return the computed end of the lesson."""
        return self.scheduled_start + timedelta(minutes=self.duration)

    def state(self, now: datetime) -> LessonState:
        """Return the derived state of the lesson at ``now``."""
        if self.scheduled_start < now:
            return LessonState.PAST
        if self.assigned_riders:
            return LessonState.FUTURE_ASSIGNED
        return LessonState.FUTURE_UNASSIGNED


@dataclass(frozen=True)
class LessonUpdate:
    """Partial update of a lesson; ``None`` leaves a field unchanged."""

    name: str | None = None
    description: str | None = None
    image_ref: str | None = None
    scheduled_start: datetime | None = None
    duration: int | None = None
    clear_image: bool = False

    def changes_schedule(self) -> bool:
        """Return True when the update moves the lesson in time."""
        return self.scheduled_start is not None or self.duration is not None


@dataclass(frozen=True)
class CalendarEvent:
    """Calendar view of a lesson."""

    id: UUID
    title: str
    start: datetime
    end: datetime
    description: str | None
    image_ref: str | None
    duration: int
    assigned_riders: frozenset[str] = field(default_factory=frozenset)
    all_day: bool = False


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
