"""Rider listing endpoint for administrators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from riding_school.api.auth import require_admin

if TYPE_CHECKING:
    from riding_school.containers import AppContainer

router = APIRouter(prefix="/riders", tags=["riders"])


@router.get("", dependencies=[Depends(require_admin)])
async def list_riders(request: Request) -> dict[str, object]:
    """Return riders available for assignment."""
    container: AppContainer = request.app.state.container
    return {
        "riders": [
            {
                "username": rider.username,
                "email": rider.email,
                "uses_default_credential": rider.uses_default_credential,
            }
            for rider in container.rider_service.list_riders()
        ]
    }
