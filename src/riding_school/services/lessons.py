"""Lesson scheduling service."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from riding_school.domain.errors import LessonNotFoundError, ValidationError
from riding_school.domain.lessons import (
    Lesson,
    LessonState,
    LessonUpdate,
    ensure_aware,
)
from riding_school.services.conflicts import ConflictChecker

logger = logging.getLogger(__name__)


class LessonRepository(Protocol):
    """Persistence interface for lessons."""

    def insert(self, lesson: Lesson) -> Lesson:
        """Store a new lesson and return it."""

    def get(self, lesson_id: UUID) -> Lesson | None:
        """Return a lesson by id, if present."""

    def list_lessons(self) -> list[Lesson]:
        """Return every stored lesson."""

    def list_for_rider(self, username: str) -> list[Lesson]:
        """Return lessons the rider is assigned to."""

    def list_in_range(self, start: datetime, end: datetime) -> list[Lesson]:
        """Return lessons starting within ``[start, end)``."""

    def save(self, lesson: Lesson) -> Lesson:
        """Replace an existing lesson and return it."""

    def delete(self, lesson_id: UUID) -> None:
        """Remove a lesson."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class LessonRules:
    """Validation limits for lesson fields."""

    min_duration: int = 15
    max_duration: int = 180
    require_description: bool = False
    strict_min_name_length: int = 3
    strict_min_description_length: int = 10


@dataclass
class LessonService:
    """Application service owning lesson lifecycle operations."""

    repository: LessonRepository
    conflict_checker: ConflictChecker
    rules: LessonRules = field(default_factory=LessonRules)
    clock: Callable[[], datetime] = _utcnow
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False
    )

    def create(  # noqa: PLR0913
        self,
        name: str | None,
        description: str | None,
        scheduled_start: datetime | None,
        duration: int | None,
        image_ref: str | None = None,
    ) -> Lesson:
        """Validate and store a new lesson."""
        if not name or not name.strip() or scheduled_start is None or not duration:
            raise ValidationError("Name, date/time, and duration are required")
        start = ensure_aware(scheduled_start)
        self._validate_start(start)
        self._validate_duration(duration)
        self._validate_text(name, description, creating=True)

        with self._lock:
            self._ensure_free(start, duration)
            now = self.clock()
            lesson = Lesson(
                id=uuid4(),
                name=name.strip(),
                description=description,
                scheduled_start=start,
                duration=duration,
                image_ref=image_ref,
                assigned_riders=frozenset(),
                created_at=now,
                updated_at=now,
            )
            created = self.repository.insert(lesson)
        logger.info("Created lesson %s at %s", created.id, start.isoformat())
        return created

    def update(self, lesson_id: UUID, changes: LessonUpdate) -> Lesson:
        """Apply a partial update to a lesson."""
        with self._lock:
            current = self.get_by_id(lesson_id)
            if changes.name is not None and not changes.name.strip():
                raise ValidationError("Name cannot be empty")
            if changes.duration is not None:
                self._validate_duration(changes.duration)
            start = (
                ensure_aware(changes.scheduled_start)
                if changes.scheduled_start is not None
                else None
            )
            if start is not None:
                self._validate_start(start)
            self._validate_text(changes.name, changes.description, creating=False)

            new_start = start or current.scheduled_start
            new_duration = changes.duration or current.duration
            if changes.changes_schedule():
                self._ensure_free(new_start, new_duration, exclude_id=lesson_id)
            image_ref = current.image_ref
            if changes.clear_image:
                image_ref = None
            elif changes.image_ref is not None:
                image_ref = changes.image_ref
            updated = replace(
                current,
                name=changes.name.strip() if changes.name else current.name,
                description=(
                    changes.description
                    if changes.description is not None
                    else current.description
                ),
                image_ref=image_ref,
                scheduled_start=new_start,
                duration=new_duration,
                updated_at=self.clock(),
            )
            saved = self.repository.save(updated)
        logger.info("Updated lesson %s", lesson_id)
        return saved

    def delete(self, lesson_id: UUID) -> None:
        """Delete a lesson that has not started yet."""
        with self._lock:
            lesson = self.get_by_id(lesson_id)
            if lesson.state(self.clock()) is LessonState.PAST:
                raise ValidationError("Cannot delete past lessons")
            self.repository.delete(lesson_id)
        logger.info("Deleted lesson %s", lesson_id)

    def mutate(
        self, lesson_id: UUID, change: Callable[[Lesson], Lesson | None]
    ) -> Lesson:
        """Apply ``change`` atomically; returning ``None`` leaves the lesson as is."""
        with self._lock:
            current = self.get_by_id(lesson_id)
            updated = change(current)
            if updated is None:
                return current
            return self.repository.save(replace(updated, updated_at=self.clock()))

    def get_by_id(self, lesson_id: UUID) -> Lesson:
        """Return a lesson or raise when it does not exist."""
        lesson = self.repository.get(lesson_id)
        if lesson is None:
            raise LessonNotFoundError
        return lesson

    def get_all(self) -> list[Lesson]:
        """Return all lessons ordered by start time."""
        return _by_start(self.repository.list_lessons())

    def get_for_rider(self, username: str) -> list[Lesson]:
        """Return lessons assigned to a rider."""
        return _by_start(self.repository.list_for_rider(username))

    def get_in_range(self, start: datetime, end: datetime) -> list[Lesson]:
        """Return lessons starting in ``[start, end)``."""
        return _by_start(
            self.repository.list_in_range(ensure_aware(start), ensure_aware(end))
        )

    def state_of(self, lesson: Lesson) -> LessonState:
        """Return the derived state of a lesson at the current time."""
        return lesson.state(self.clock())

    def _ensure_free(
        self, start: datetime, duration: int, exclude_id: UUID | None = None
    ) -> None:
        conflicts = self.conflict_checker.find_conflicts(start, duration, exclude_id)
        if conflicts:
            logger.info(
                "Rejected slot %s (%s min): overlaps %s",
                start.isoformat(),
                duration,
                ", ".join(str(lesson.id) for lesson in conflicts),
            )
            raise ValidationError("Time slot conflicts with an existing lesson")

    def _validate_start(self, start: datetime) -> None:
        if start < self.clock():
            raise ValidationError("Lesson date cannot be in the past")

    def _validate_duration(self, duration: int) -> None:
        if not self.rules.min_duration <= duration <= self.rules.max_duration:
            raise ValidationError(
                f"Duration must be between {self.rules.min_duration} "
                f"and {self.rules.max_duration} minutes"
            )

    def _validate_text(
        self, name: str | None, description: str | None, *, creating: bool
    ) -> None:
        if not self.rules.require_description:
            return
        if name is not None and len(name.strip()) < self.rules.strict_min_name_length:
            raise ValidationError(
                f"Name must be at least {self.rules.strict_min_name_length} characters"
            )
        if description is None and not creating:
            return
        if (
            description is None
            or len(description.strip()) < self.rules.strict_min_description_length
        ):
            raise ValidationError(
                "Description must be at least "
                f"{self.rules.strict_min_description_length} characters"
            )


def _by_start(lessons: list[Lesson]) -> list[Lesson]:
    return sorted(lessons, key=lambda lesson: lesson.scheduled_start)
