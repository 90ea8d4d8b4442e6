"""Supabase-backed lesson repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from riding_school.domain.lessons import Lesson
from riding_school.services.lessons import LessonRepository

_TABLE = "lessons"
_COLUMNS = (
    "id, name, description, scheduled_start, duration, image_ref, "
    "assigned_riders, created_at, updated_at"
)


@dataclass
class SupabaseLessonRepository(LessonRepository):
    """Supabase implementation for lesson persistence."""

    client: Client

    def insert(self, lesson: Lesson) -> Lesson:
        """Insert a lesson row and return the stored lesson."""
        response = self.client.table(_TABLE).insert(_to_row(lesson)).execute()
        if not response.data:
            raise RuntimeError("Failed to create lesson in Supabase")
        return _parse_lesson(response.data[0])

    def get(self, lesson_id: UUID) -> Lesson | None:
        """Return a lesson by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("id", str(lesson_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_lesson(response.data[0])

    def list_lessons(self) -> list[Lesson]:
        """Return all lessons."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .order("scheduled_start")
            .execute()
        )
        return [_parse_lesson(row) for row in response.data or []]

    def list_for_rider(self, username: str) -> list[Lesson]:
        """Return lessons whose rider array contains ``username``."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .contains("assigned_riders", [username])
            .order("scheduled_start")
            .execute()
        )
        return [_parse_lesson(row) for row in response.data or []]

    def list_in_range(self, start: datetime, end: datetime) -> list[Lesson]:
        """Return lessons starting in ``[start, end)``."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .gte("scheduled_start", start.isoformat())
            .lt("scheduled_start", end.isoformat())
            .order("scheduled_start")
            .execute()
        )
        return [_parse_lesson(row) for row in response.data or []]

    def save(self, lesson: Lesson) -> Lesson:
        """Overwrite the mutable columns of a lesson."""
        row = _to_row(lesson)
        row.pop("id")
        row.pop("created_at")
        response = (
            self.client.table(_TABLE).update(row).eq("id", str(lesson.id)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update lesson in Supabase")
        return _parse_lesson(response.data[0])

    def delete(self, lesson_id: UUID) -> None:
        """Delete a lesson row."""
        self.client.table(_TABLE).delete().eq("id", str(lesson_id)).execute()


def _to_row(lesson: Lesson) -> dict[str, object]:
    return {
        "id": str(lesson.id),
        "name": lesson.name,
        "description": lesson.description,
        "scheduled_start": lesson.scheduled_start.isoformat(),
        "duration": lesson.duration,
        "image_ref": lesson.image_ref,
        "assigned_riders": sorted(lesson.assigned_riders),
        "created_at": lesson.created_at.isoformat(),
        "updated_at": lesson.updated_at.isoformat(),
    }


def _parse_lesson(row: dict[str, object]) -> Lesson:
    return Lesson(
        id=UUID(str(row["id"])),
        name=str(row["name"]),
        description=row.get("description"),
        scheduled_start=datetime.fromisoformat(str(row["scheduled_start"])),
        duration=int(row["duration"]),
        image_ref=row.get("image_ref"),
        assigned_riders=frozenset(row.get("assigned_riders") or []),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )
