"""Rider assignment management for lessons."""

import logging
from dataclasses import dataclass, replace
from uuid import UUID

from riding_school.domain.errors import ValidationError
from riding_school.domain.lessons import Lesson
from riding_school.services.lessons import LessonService
from riding_school.services.notifications import (
    AssignmentNotification,
    NotificationQueue,
)
from riding_school.services.riders import RiderService

logger = logging.getLogger(__name__)


@dataclass
class AssignmentService:
    """Assigns riders to lessons and queues their notification emails."""

    lesson_service: LessonService
    rider_service: RiderService
    notifications: NotificationQueue
    single_rider: bool = False

    def assign(self, lesson_id: UUID, rider_username: str) -> Lesson:
        """Assign a rider; re-assigning a present rider is a no-op."""
        username = (rider_username or "").strip()
        if not username:
            raise ValidationError("Rider username is required")
        self.lesson_service.get_by_id(lesson_id)
        rider = self.rider_service.find_rider(username)
        if rider is None:
            raise ValidationError("Invalid rider username")

        added = False

        def _add(lesson: Lesson) -> Lesson | None:
            nonlocal added
            if username in lesson.assigned_riders:
                if self.single_rider:
                    raise ValidationError("Lesson is already assigned to a rider")
                return None
            if self.single_rider and lesson.assigned_riders:
                raise ValidationError("Lesson is already assigned to a rider")
            added = True
            return replace(
                lesson, assigned_riders=lesson.assigned_riders | {username}
            )

        lesson = self.lesson_service.mutate(lesson_id, _add)
        if added:
            logger.info("Assigned rider %s to lesson %s", username, lesson_id)
            self._notify(rider.email, lesson)
        return lesson

    def unassign(self, lesson_id: UUID, rider_username: str) -> Lesson:
        """Remove a rider; removing an absent rider is a no-op."""
        username = (rider_username or "").strip()
        if not username:
            raise ValidationError("Rider username is required")

        removed = False

        def _remove(lesson: Lesson) -> Lesson | None:
            nonlocal removed
            if username not in lesson.assigned_riders:
                return None
            removed = True
            return replace(
                lesson, assigned_riders=lesson.assigned_riders - {username}
            )

        lesson = self.lesson_service.mutate(lesson_id, _remove)
        if removed:
            logger.info("Unassigned rider %s from lesson %s", username, lesson_id)
        return lesson

    def _notify(self, email: str, lesson: Lesson) -> None:
        try:
            self.notifications.enqueue(
                AssignmentNotification(rider_email=email, lesson=lesson)
            )
        except Exception:
            logger.exception("Failed to queue assignment email for %s", lesson.id)
