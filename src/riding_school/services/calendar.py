"""Calendar projections of lessons."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from riding_school.domain.errors import PermissionDeniedError, ValidationError
from riding_school.domain.lessons import (
    CalendarEvent,
    Lesson,
    LessonUpdate,
    ensure_aware,
)
from riding_school.domain.riders import Principal
from riding_school.services.lessons import LessonService


@dataclass
class CalendarProjector:
    """Maps lessons to role-scoped calendar events."""

    def project(self, lessons: list[Lesson], viewer: Principal) -> list[CalendarEvent]:
        """Project lessons visible to ``viewer``."""
        if not viewer.is_admin:
            lessons = [
                lesson
                for lesson in lessons
                if viewer.username in lesson.assigned_riders
            ]
        return [self.to_event(lesson, viewer) for lesson in lessons]

    def project_range(
        self,
        lessons: list[Lesson],
        start: datetime,
        end: datetime,
        viewer: Principal,
    ) -> list[CalendarEvent]:
        """Project visible lessons starting within ``[start, end]``."""
        start = ensure_aware(start)
        end = ensure_aware(end)
        return [
            event
            for event in self.project(lessons, viewer)
            if start <= event.start <= end
        ]

    def to_event(self, lesson: Lesson, viewer: Principal) -> CalendarEvent:
        title = lesson.name
        if viewer.is_admin and lesson.assigned_riders:
            title = f"{lesson.name} ({', '.join(sorted(lesson.assigned_riders))})"
        return CalendarEvent(
            id=lesson.id,
            title=title,
            start=lesson.scheduled_start,
            end=lesson.scheduled_end,
            description=lesson.description,
            image_ref=lesson.image_ref,
            duration=lesson.duration,
            assigned_riders=lesson.assigned_riders,
        )


@dataclass
class CalendarService:
    """Calendar queries and drag-and-drop rescheduling."""

    lesson_service: LessonService
    projector: CalendarProjector

    def list_events(self, viewer: Principal) -> list[CalendarEvent]:
        return self.projector.project(self._visible_lessons(viewer), viewer)

    def list_events_in_range(
        self, viewer: Principal, start: datetime | None, end: datetime | None
    ) -> list[CalendarEvent]:
        """Return visible events starting within ``[start, end]``."""
        if start is None or end is None:
            raise ValidationError("Start and end dates are required")
        if ensure_aware(end) < ensure_aware(start):
            raise ValidationError("End date must not be before start date")
        return self.projector.project_range(
            self._visible_lessons(viewer), start, end, viewer
        )

    def reschedule(
        self,
        viewer: Principal,
        lesson_id: UUID,
        start: datetime | None,
        end: datetime | None = None,
    ) -> CalendarEvent:
        """Move a lesson; admins or assigned riders only."""
        if start is None:
            raise ValidationError("New date and time are required")
        lesson = self.lesson_service.get_by_id(lesson_id)
        if not viewer.is_admin and viewer.username not in lesson.assigned_riders:
            raise PermissionDeniedError(
                "You do not have permission to update this lesson"
            )
        duration = None
        if end is not None:
            span = ensure_aware(end) - ensure_aware(start)
            duration = span // timedelta(minutes=1)
        updated = self.lesson_service.update(
            lesson_id, LessonUpdate(scheduled_start=start, duration=duration)
        )
        return self.projector.to_event(updated, viewer)

    def _visible_lessons(self, viewer: Principal) -> list[Lesson]:
        if viewer.is_admin:
            return self.lesson_service.get_all()
        return self.lesson_service.get_for_rider(viewer.username)
