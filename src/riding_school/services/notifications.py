"""Background delivery of lesson assignment emails."""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from html import escape
from typing import Protocol

from riding_school.domain.lessons import Lesson

logger = logging.getLogger(__name__)


class EmailClient(Protocol):
    """Interface for outbound email delivery."""

    async def send_email(self, to: str, subject: str, html: str) -> None:
        """Send an HTML email."""


@dataclass(frozen=True)
class AssignmentNotification:
    """Email owed to a rider after being assigned to a lesson."""

    rider_email: str
    lesson: Lesson


@dataclass(frozen=True)
class EmailMessage:
    """Rendered email content."""

    subject: str
    html: str


def render_assignment_email(lesson: Lesson) -> EmailMessage:
    """Render the assignment email for a lesson snapshot."""
    image = (
        f'<img src="{escape(lesson.image_ref)}" alt="Lesson Image" '
        'style="max-width: 100%; height: auto; margin: 20px 0;">'
        if lesson.image_ref
        else ""
    )
    start = lesson.scheduled_start
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px;">'
        "<h2>You have been assigned to a new riding lesson!</h2>"
        f"{image}"
        f"<p><strong>Lesson:</strong> {escape(lesson.name)}</p>"
        "<p><strong>Description:</strong> "
        f"{escape(lesson.description or 'No description provided')}</p>"
        f"<p><strong>Date:</strong> {start.strftime('%Y-%m-%d')}</p>"
        f"<p><strong>Time:</strong> {start.strftime('%H:%M %Z')}</p>"
        f"<p><strong>Duration:</strong> {lesson.duration} minutes</p>"
        "<p>Please log in to your dashboard to view more details.</p>"
        "</div>"
    )
    return EmailMessage(
        subject=f"New Riding Lesson Assigned: {lesson.name}",
        html=html,
    )


class NotificationQueue:
    """Queue drained by a single worker task; one delivery attempt per item."""

    def __init__(self, email_client: EmailClient) -> None:
        self.email_client = email_client
        self._queue: asyncio.Queue[AssignmentNotification] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def enqueue(self, notification: AssignmentNotification) -> None:
        """Hand a notification to the worker without waiting for delivery."""
        self._queue.put_nowait(notification)

    async def start(self) -> None:
        """Start the worker task on the running loop.

        Items left over from a previous loop are moved to a fresh queue so the
        worker never waits on a queue bound to a closed loop.
        """
        if self._worker is not None and not self._worker.done():
            return
        leftover: list[AssignmentNotification] = []
        while not self._queue.empty():
            leftover.append(self._queue.get_nowait())
        self._queue = asyncio.Queue()
        for notification in leftover:
            self._queue.put_nowait(notification)
        self._worker = asyncio.create_task(self._run())
        self._worker.add_done_callback(_log_worker_exit)

    async def join(self) -> None:
        """Wait until every queued notification has had its delivery attempt."""
        await self._queue.join()

    async def close(self) -> None:
        """Stop the worker and give pending notifications a final attempt."""
        worker, self._worker = self._worker, None
        if worker is not None:
            worker.cancel()
            try:
                with contextlib.suppress(asyncio.CancelledError):
                    await worker
            except Exception:
                logger.exception("Notification worker stopped with an error")
        await self.drain()

    async def drain(self) -> int:
        """Deliver everything currently queued and return the number sent."""
        sent = 0
        while not self._queue.empty():
            notification = self._queue.get_nowait()
            if await self.deliver(notification):
                sent += 1
            self._queue.task_done()
        return sent

    async def deliver(self, notification: AssignmentNotification) -> bool:
        """Send one notification, logging instead of raising on failure."""
        message = render_assignment_email(notification.lesson)
        try:
            await self.email_client.send_email(
                notification.rider_email, message.subject, message.html
            )
        except Exception:
            logger.exception(
                "Failed to send lesson assignment email for lesson %s",
                notification.lesson.id,
            )
            return False
        logger.info(
            "Sent lesson assignment email for lesson %s", notification.lesson.id
        )
        return True

    async def _run(self) -> None:
        while True:
            notification = await self._queue.get()
            try:
                await self.deliver(notification)
            finally:
                self._queue.task_done()


def _log_worker_exit(task: asyncio.Task[None]) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error(
            "Notification worker stopped; emails wait for the next start or close",
            exc_info=task.exception(),
        )
