"""Tests for container wiring."""

import asyncio

import pytest

from riding_school.adapters.email_client import HttpxEmailClient, LoggingEmailClient
from riding_school.adapters.memory_lesson_repository import InMemoryLessonRepository
from riding_school.adapters.supabase_lesson_repository import (
    SupabaseLessonRepository,
)
from riding_school.config import Settings
from riding_school.containers import build_container


def test_build_container_defaults_to_memory_store(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.lesson_service.repository, InMemoryLessonRepository)
    assert isinstance(container.notifications.email_client, LoggingEmailClient)
    assert container.principals["alice-token"].username == "alice"
    assert container.assignment_service.single_rider is False
    asyncio.run(container.close_resources())


def test_build_container_with_supabase_store_and_email(settings: Settings) -> None:
    configured = settings.model_copy(
        update={
            "lesson_backend": "supabase",
            "email_api_key": "re_test",
            "single_rider_lessons": True,
            "require_lesson_description": True,
        }
    )

    container = build_container(configured)

    assert isinstance(container.lesson_service.repository, SupabaseLessonRepository)
    assert isinstance(container.notifications.email_client, HttpxEmailClient)
    assert container.assignment_service.single_rider is True
    assert container.lesson_service.rules.require_description is True
    asyncio.run(container.close_resources())


def test_build_container_rejects_unknown_backend(settings: Settings) -> None:
    with pytest.raises(ValueError, match="lesson backend"):
        build_container(settings.model_copy(update={"lesson_backend": "redis"}))


def test_close_resources_always_closes_email_client(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    container = build_container(settings.model_copy(update={"email_api_key": "re_x"}))
    email_client = container.notifications.email_client
    assert isinstance(email_client, HttpxEmailClient)

    async def broken_close() -> None:
        raise RuntimeError("queue shutdown failed")

    monkeypatch.setattr(container.notifications, "close", broken_close)

    with pytest.raises(RuntimeError):
        asyncio.run(container.close_resources())

    assert email_client.http_client.is_closed
