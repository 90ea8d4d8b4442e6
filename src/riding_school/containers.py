"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from riding_school.adapters.email_client import HttpxEmailClient, LoggingEmailClient
from riding_school.adapters.memory_lesson_repository import InMemoryLessonRepository
from riding_school.adapters.supabase_lesson_repository import (
    SupabaseLessonRepository,
)
from riding_school.adapters.supabase_rider_repository import SupabaseRiderRepository
from riding_school.config import Settings, parse_api_tokens
from riding_school.domain.riders import Principal
from riding_school.services.assignments import AssignmentService
from riding_school.services.calendar import CalendarProjector, CalendarService
from riding_school.services.conflicts import ConflictChecker
from riding_school.services.lessons import LessonRepository, LessonRules, LessonService
from riding_school.services.notifications import NotificationQueue
from riding_school.services.riders import RiderService

LESSON_BACKENDS = ("memory", "supabase")


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    principals: dict[str, Principal]
    lesson_service: LessonService
    assignment_service: AssignmentService
    calendar_service: CalendarService
    rider_service: RiderService
    notifications: NotificationQueue
    close_resources: Callable[[], Awaitable[None]]


def build_lesson_service(
    repository: LessonRepository, settings: Settings
) -> LessonService:
    """Create the lesson service with rules taken from settings."""
    return LessonService(
        repository=repository,
        conflict_checker=ConflictChecker(repository),
        rules=LessonRules(require_description=settings.require_lesson_description),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    if resolved_settings.lesson_backend not in LESSON_BACKENDS:
        raise ValueError(
            f"Unknown lesson backend {resolved_settings.lesson_backend!r}; "
            f"expected one of {', '.join(LESSON_BACKENDS)}"
        )
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    lesson_repository: LessonRepository
    if resolved_settings.lesson_backend == "supabase":
        lesson_repository = SupabaseLessonRepository(supabase_client)
    else:
        lesson_repository = InMemoryLessonRepository()
    lesson_service = build_lesson_service(lesson_repository, resolved_settings)
    rider_service = RiderService(SupabaseRiderRepository(supabase_client))

    email_client: HttpxEmailClient | LoggingEmailClient
    if resolved_settings.email_api_key:
        email_client = HttpxEmailClient.create(
            api_key=resolved_settings.email_api_key,
            sender=resolved_settings.email_from,
            api_url=resolved_settings.email_api_url,
        )
    else:
        email_client = LoggingEmailClient()
    notifications = NotificationQueue(email_client)
    assignment_service = AssignmentService(
        lesson_service=lesson_service,
        rider_service=rider_service,
        notifications=notifications,
        single_rider=resolved_settings.single_rider_lessons,
    )
    calendar_service = CalendarService(
        lesson_service=lesson_service,
        projector=CalendarProjector(),
    )

    async def close_resources() -> None:
        try:
            await notifications.close()
        finally:
            await email_client.close()

    return AppContainer(
        settings=resolved_settings,
        principals=parse_api_tokens(resolved_settings.api_tokens),
        lesson_service=lesson_service,
        assignment_service=assignment_service,
        calendar_service=calendar_service,
        rider_service=rider_service,
        notifications=notifications,
        close_resources=close_resources,
    )
