"""Lesson management endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from riding_school.api.auth import get_principal, require_admin
from riding_school.api.schemas import (
    LessonCreateRequest,
    LessonUpdateRequest,
    RiderAssignmentRequest,
)
from riding_school.domain.errors import PermissionDeniedError, ValidationError
from riding_school.domain.riders import Principal

if TYPE_CHECKING:
    from riding_school.containers import AppContainer
    from riding_school.domain.lessons import Lesson

router = APIRouter(prefix="/lessons", tags=["lessons"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_lesson(
    payload: LessonCreateRequest, request: Request
) -> dict[str, object]:
    """Create a lesson slot."""
    container: AppContainer = request.app.state.container
    lesson = container.lesson_service.create(
        name=payload.name,
        description=payload.description,
        scheduled_start=payload.scheduled_start,
        duration=payload.duration,
        image_ref=payload.image_ref,
    )
    return serialize_lesson(lesson, container)


@router.get("", dependencies=[Depends(get_principal)])
async def list_lessons(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    lessons = container.lesson_service.get_all()
    return {"lessons": [serialize_lesson(lesson, container) for lesson in lessons]}


@router.get("/range", dependencies=[Depends(get_principal)])
async def list_lessons_in_range(
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
) -> dict[str, object]:
    """Return lessons starting in ``[start, end)``."""
    if start is None or end is None:
        raise ValidationError("Start and end dates are required")
    container: AppContainer = request.app.state.container
    lessons = container.lesson_service.get_in_range(start, end)
    return {"lessons": [serialize_lesson(lesson, container) for lesson in lessons]}


@router.get("/rider/{username}")
async def list_rider_lessons(
    username: str,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return a rider's lessons; admins or the rider only."""
    if not principal.is_admin and principal.username != username:
        raise PermissionDeniedError("Unauthorized access")
    container: AppContainer = request.app.state.container
    lessons = container.lesson_service.get_for_rider(username)
    return {"lessons": [serialize_lesson(lesson, container) for lesson in lessons]}


@router.get("/{lesson_id}", dependencies=[Depends(get_principal)])
async def get_lesson(lesson_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return serialize_lesson(container.lesson_service.get_by_id(lesson_id), container)


@router.put("/{lesson_id}", dependencies=[Depends(require_admin)])
async def update_lesson(
    lesson_id: UUID, payload: LessonUpdateRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    lesson = container.lesson_service.update(lesson_id, payload.to_update())
    return serialize_lesson(lesson, container)


@router.delete("/{lesson_id}", dependencies=[Depends(require_admin)])
async def delete_lesson(lesson_id: UUID, request: Request) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.lesson_service.delete(lesson_id)
    return {"message": "Lesson deleted successfully"}


@router.post("/{lesson_id}/assign", dependencies=[Depends(require_admin)])
async def assign_rider(
    lesson_id: UUID, payload: RiderAssignmentRequest, request: Request
) -> dict[str, object]:
    """Assign a rider and queue their notification email."""
    container: AppContainer = request.app.state.container
    lesson = container.assignment_service.assign(
        lesson_id, payload.rider_username or ""
    )
    return serialize_lesson(lesson, container)


@router.post("/{lesson_id}/unassign", dependencies=[Depends(require_admin)])
async def unassign_rider(
    lesson_id: UUID, payload: RiderAssignmentRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    lesson = container.assignment_service.unassign(
        lesson_id, payload.rider_username or ""
    )
    return serialize_lesson(lesson, container)


def serialize_lesson(lesson: Lesson, container: AppContainer) -> dict[str, object]:
    return {
        "id": str(lesson.id),
        "name": lesson.name,
        "description": lesson.description,
        "scheduled_start": lesson.scheduled_start.isoformat(),
        "end": lesson.scheduled_end.isoformat(),
        "duration": lesson.duration,
        "image_ref": lesson.image_ref,
        "assigned_riders": sorted(lesson.assigned_riders),
        "state": str(container.lesson_service.state_of(lesson)),
        "created_at": lesson.created_at.isoformat(),
        "updated_at": lesson.updated_at.isoformat(),
    }
