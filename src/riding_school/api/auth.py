"""Bearer-token principal resolution for API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

from riding_school.domain.riders import Principal

if TYPE_CHECKING:
    from riding_school.containers import AppContainer

_BEARER_PREFIX = "bearer "
_INVALID_CREDENTIALS = "Invalid authentication credentials"


def _get_principals(request: Request) -> dict[str, Principal]:
    container: AppContainer = request.app.state.container
    return container.principals


async def get_principal(
    authorization: str | None = Header(default=None),
    principals: dict[str, Principal] = Depends(_get_principals),
) -> Principal:
    """Resolve the caller from an ``Authorization: Bearer`` header."""
    principal = None
    if authorization and authorization.lower().startswith(_BEARER_PREFIX):
        principal = principals.get(authorization[len(_BEARER_PREFIX) :].strip())
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


async def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    """Ensure the caller has the admin role."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
