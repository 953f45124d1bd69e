"""Scheduled task endpoints guarded by the admin token."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from conference_central.containers import AppContainer

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/announcement", dependencies=[Depends(require_admin)])
def refresh_announcement(request: Request) -> dict[str, object]:
    """Rebuild the cached announcement of nearly sold out conferences."""
    container: AppContainer = request.app.state.container
    message = container.announcements.refresh()
    return {"updated": message is not None, "message": message}
