"""Owner identity dependency.

The hosted auth provider verifies sessions upstream; by the time a request
reaches this service the bearer token is the caller's owner id.
"""

from typing import Annotated

from fastapi import Header, HTTPException, status

from tripdesk.app.config import get_settings
from tripdesk.app.db.context import RequestContext

MAX_OWNER_ID_LENGTH = 128


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    - ``Bearer <owner_id>`` yields that owner
    - No header yields the configured development owner

    Args:
        authorization: Authorization header (e.g., "Bearer <owner_id>")

    Returns:
        RequestContext with owner_id

    Raises:
        HTTPException: If authorization is malformed
    """
    if not authorization:
        return RequestContext(owner_id=get_settings().default_owner_id)

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    owner_id = authorization[7:].strip()  # Strip "Bearer "

    if not owner_id or len(owner_id) > MAX_OWNER_ID_LENGTH or any(c.isspace() for c in owner_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return RequestContext(owner_id=owner_id)
