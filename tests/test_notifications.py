"""Tests for the assignment notification queue."""

import asyncio
import logging
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from riding_school.domain.lessons import Lesson
from riding_school.services.notifications import (
    AssignmentNotification,
    NotificationQueue,
    render_assignment_email,
)
from tests.conftest import FakeEmailClient


def _lesson(**overrides: object) -> Lesson:
    values: dict[str, object] = {
        "id": uuid4(),
        "name": "Trot Basics",
        "description": None,
        "scheduled_start": datetime(2099, 1, 1, 10, tzinfo=UTC),
        "duration": 60,
        "image_ref": None,
        "assigned_riders": frozenset({"alice"}),
        "created_at": datetime(2030, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2030, 1, 1, tzinfo=UTC),
    }
    values.update(overrides)
    return Lesson(**values)  # type: ignore[arg-type]


def test_render_assignment_email_includes_lesson_details() -> None:
    message = render_assignment_email(
        _lesson(description="Rising <trot>", image_ref="/uploads/lessons/a.png")
    )

    assert message.subject == "New Riding Lesson Assigned: Trot Basics"
    assert "Rising &lt;trot&gt;" in message.html
    assert 'src="/uploads/lessons/a.png"' in message.html
    assert "2099-01-01" in message.html
    assert "60 minutes" in message.html


def test_render_assignment_email_without_description() -> None:
    message = render_assignment_email(_lesson())

    assert "No description provided" in message.html
    assert "<img" not in message.html


def test_worker_delivers_queued_notifications() -> None:
    email_client = FakeEmailClient()
    queue = NotificationQueue(email_client)

    async def scenario() -> None:
        await queue.start()
        queue.enqueue(AssignmentNotification("alice@example.com", _lesson()))
        await asyncio.wait_for(queue.join(), timeout=1)
        await queue.close()

    asyncio.run(scenario())

    assert [to for to, _, _ in email_client.sent] == ["alice@example.com"]


def test_delivery_failure_is_logged_not_raised(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    queue = NotificationQueue(FakeEmailClient(fail=True))
    queue.enqueue(AssignmentNotification("alice@example.com", _lesson()))
    monkeypatch.setattr(logging.getLogger("riding_school"), "propagate", True)

    with caplog.at_level(logging.ERROR, logger="riding_school"):
        sent = asyncio.run(queue.drain())

    assert sent == 0
    assert queue.pending == 0
    assert "Failed to send lesson assignment email" in caplog.text


def test_close_flushes_pending_notifications() -> None:
    email_client = FakeEmailClient()
    queue = NotificationQueue(email_client)
    queue.enqueue(AssignmentNotification("bob@example.com", _lesson()))

    asyncio.run(queue.close())

    assert len(email_client.sent) == 1


def test_worker_restarts_on_a_new_event_loop() -> None:
    email_client = FakeEmailClient()
    queue = NotificationQueue(email_client)

    async def first_run() -> None:
        await queue.start()
        await queue.close()

    async def second_run() -> None:
        await queue.start()
        queue.enqueue(AssignmentNotification("alice@example.com", _lesson()))
        await asyncio.wait_for(queue.join(), timeout=1)
        await queue.close()

    asyncio.run(first_run())
    asyncio.run(second_run())

    assert [to for to, _, _ in email_client.sent] == ["alice@example.com"]


def test_close_logs_crashed_worker_and_still_drains(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    email_client = FakeEmailClient()
    queue = NotificationQueue(email_client)
    monkeypatch.setattr(logging.getLogger("riding_school"), "propagate", True)

    async def broken_deliver(notification: AssignmentNotification) -> bool:
        raise RuntimeError("renderer exploded")

    async def scenario() -> None:
        queue.deliver = broken_deliver  # type: ignore[method-assign]
        await queue.start()
        queue.enqueue(AssignmentNotification("alice@example.com", _lesson()))
        await asyncio.wait_for(queue.join(), timeout=1)
        del queue.deliver
        queue.enqueue(AssignmentNotification("bob@example.com", _lesson()))
        await queue.close()

    with caplog.at_level(logging.ERROR, logger="riding_school"):
        asyncio.run(scenario())

    assert [to for to, _, _ in email_client.sent] == ["bob@example.com"]
    assert "Notification worker stopped with an error" in caplog.text
