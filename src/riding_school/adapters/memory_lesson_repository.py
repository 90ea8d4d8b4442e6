"""Process-local lesson repository."""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from riding_school.domain.lessons import Lesson
from riding_school.services.lessons import LessonRepository


@dataclass
class InMemoryLessonRepository(LessonRepository):
    """Lock-guarded dict of lessons; contents are lost on restart."""

    _lessons: dict[UUID, Lesson] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def insert(self, lesson: Lesson) -> Lesson:
        with self._lock:
            if lesson.id in self._lessons:
                raise RuntimeError(f"Lesson {lesson.id} already exists")
            self._lessons[lesson.id] = lesson
        return lesson

    def get(self, lesson_id: UUID) -> Lesson | None:
        with self._lock:
            return self._lessons.get(lesson_id)

    def list_lessons(self) -> list[Lesson]:
        with self._lock:
            return list(self._lessons.values())

    def list_for_rider(self, username: str) -> list[Lesson]:
        with self._lock:
            return [
                lesson
                for lesson in self._lessons.values()
                if username in lesson.assigned_riders
            ]

    def list_in_range(self, start: datetime, end: datetime) -> list[Lesson]:
        with self._lock:
            return [
                lesson
                for lesson in self._lessons.values()
                if start <= lesson.scheduled_start < end
            ]

    def save(self, lesson: Lesson) -> Lesson:
        with self._lock:
            if lesson.id not in self._lessons:
                raise RuntimeError(f"Lesson {lesson.id} does not exist")
            self._lessons[lesson.id] = lesson
        return lesson

    def delete(self, lesson_id: UUID) -> None:
        with self._lock:
            self._lessons.pop(lesson_id, None)
