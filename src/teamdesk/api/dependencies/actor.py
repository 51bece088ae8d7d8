"""Acting user dependency.

Authentication happens upstream; the gateway forwards the authenticated
user's id in X-Actor-ID.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.teamdesk.core.logging import bind_actor_context


async def get_actor_id(
    x_actor_id: Annotated[str | None, Header()] = None,
) -> UUID:
    """Extract the acting user's id from header."""
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-ID header is required",
        )
    try:
        actor_id = UUID(x_actor_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-ID header must be a UUID",
        ) from None
    bind_actor_context(actor_id)
    return actor_id


ActorId = Annotated[UUID, Depends(get_actor_id)]
