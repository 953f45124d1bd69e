"""Caller identity resolution."""

from fastapi import Header

from conference_central.domain.errors import UnauthenticatedError
from conference_central.domain.models import Identity


async def current_identity(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
) -> Identity:
    """Resolve the caller from headers set by the authenticating proxy."""
    if not x_user_id or not x_user_id.strip():
        raise UnauthenticatedError()
    return Identity(user_id=x_user_id.strip(), email=x_user_email or None)
