"""Role-scoped calendar endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from riding_school.api.auth import get_principal
from riding_school.api.schemas import EventRescheduleRequest
from riding_school.domain.riders import Principal

if TYPE_CHECKING:
    from riding_school.containers import AppContainer
    from riding_school.domain.lessons import CalendarEvent

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
async def list_events(
    request: Request, principal: Principal = Depends(get_principal)
) -> dict[str, object]:
    """Admins see every lesson, riders only their own."""
    container: AppContainer = request.app.state.container
    events = container.calendar_service.list_events(principal)
    return {"events": [serialize_event(event) for event in events]}


@router.get("/range")
async def list_events_in_range(
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    events = container.calendar_service.list_events_in_range(principal, start, end)
    return {"events": [serialize_event(event) for event in events]}


@router.put("/{lesson_id}")
async def reschedule_event(
    lesson_id: UUID,
    payload: EventRescheduleRequest,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Move a lesson on the calendar, re-running the schedule checks."""
    container: AppContainer = request.app.state.container
    event = container.calendar_service.reschedule(
        principal, lesson_id, payload.start, payload.end
    )
    return serialize_event(event)


def serialize_event(event: CalendarEvent) -> dict[str, object]:
    return {
        "id": str(event.id),
        "title": event.title,
        "description": event.description,
        "start": event.start.isoformat(),
        "end": event.end.isoformat(),
        "all_day": event.all_day,
        "extended_props": {
            "duration": event.duration,
            "assigned_riders": sorted(event.assigned_riders),
            "image_ref": event.image_ref,
        },
    }
