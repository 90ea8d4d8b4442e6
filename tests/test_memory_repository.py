"""Tests for the in-memory lesson repository."""

from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from riding_school.adapters.memory_lesson_repository import InMemoryLessonRepository
from riding_school.domain.lessons import Lesson
from tests.conftest import lesson_start


def _lesson(start: datetime, riders: frozenset[str] = frozenset()) -> Lesson:
    now = datetime(2030, 1, 1, tzinfo=UTC)
    return Lesson(
        id=uuid4(),
        name="Flatwork",
        description=None,
        scheduled_start=start,
        duration=60,
        image_ref=None,
        assigned_riders=riders,
        created_at=now,
        updated_at=now,
    )


def test_insert_rejects_duplicate_ids() -> None:
    repository = InMemoryLessonRepository()
    lesson = repository.insert(_lesson(lesson_start(9)))

    with pytest.raises(RuntimeError):
        repository.insert(lesson)


def test_save_requires_existing_lesson() -> None:
    repository = InMemoryLessonRepository()

    with pytest.raises(RuntimeError):
        repository.save(_lesson(lesson_start(9)))


def test_range_excludes_end_bound() -> None:
    repository = InMemoryLessonRepository()
    morning = repository.insert(_lesson(lesson_start(9)))
    repository.insert(_lesson(lesson_start(12)))

    found = repository.list_in_range(lesson_start(9), lesson_start(12))

    assert found == [morning]


def test_rider_filter_and_delete() -> None:
    repository = InMemoryLessonRepository()
    lesson = repository.insert(_lesson(lesson_start(9), frozenset({"alice"})))
    repository.save(replace(lesson, name="Renamed"))

    assert [item.name for item in repository.list_for_rider("alice")] == ["Renamed"]
    assert repository.list_for_rider("bob") == []

    repository.delete(lesson.id)
    repository.delete(lesson.id)

    assert repository.get(lesson.id) is None
