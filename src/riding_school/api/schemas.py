"""Pydantic request models for the lesson API."""

from datetime import datetime

from pydantic import BaseModel, Field

from riding_school.domain.lessons import LessonUpdate


class LessonCreateRequest(BaseModel):
    """Lesson creation payload."""

    name: str | None = None
    description: str | None = None
    scheduled_start: datetime | None = None
    duration: int | None = None
    image_ref: str | None = None


class LessonUpdateRequest(BaseModel):
    """Partial lesson update payload."""

    name: str | None = None
    description: str | None = None
    scheduled_start: datetime | None = None
    duration: int | None = None
    image_ref: str | None = None
    clear_image: bool = False

    def to_update(self) -> LessonUpdate:
        return LessonUpdate(
            name=self.name,
            description=self.description,
            image_ref=self.image_ref,
            scheduled_start=self.scheduled_start,
            duration=self.duration,
            clear_image=self.clear_image,
        )


class RiderAssignmentRequest(BaseModel):
    """Assign or unassign payload."""

    rider_username: str | None = Field(default=None, max_length=150)


class EventRescheduleRequest(BaseModel):
    """Calendar drag-and-drop payload."""

    start: datetime | None = None
    end: datetime | None = None
