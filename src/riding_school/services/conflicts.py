"""Time-slot conflict detection for lessons."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from riding_school.domain.lessons import Lesson
    from riding_school.services.lessons import LessonRepository


def intervals_overlap(
    first_start: datetime,
    first_end: datetime,
    second_start: datetime,
    second_end: datetime,
) -> bool:
    """Return True when two half-open intervals share any instant."""
    return first_start < second_end and second_start < first_end


@dataclass
class ConflictChecker:
    """Detects overlaps between a candidate slot and scheduled lessons."""

    repository: LessonRepository

    def find_conflicts(
        self, start: datetime, duration: int, exclude_id: UUID | None = None
    ) -> list[Lesson]:
        """Return lessons overlapping ``[start, start + duration)``."""
        end = start + timedelta(minutes=duration)
        return [
            lesson
            for lesson in self.repository.list_lessons()
            if lesson.id != exclude_id
            and intervals_overlap(
                start, end, lesson.scheduled_start, lesson.scheduled_end
            )
        ]

    def has_conflict(
        self, start: datetime, duration: int, exclude_id: UUID | None = None
    ) -> bool:
        """Return True when the candidate slot overlaps another lesson."""
        return bool(self.find_conflicts(start, duration, exclude_id))
