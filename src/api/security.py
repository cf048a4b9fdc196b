"""Acting-user identification.

The caller names the user on whose authority a request runs in the
X-Acting-User-Login header. The value is trusted as-is; the user service
decides whether it resolves to an active user and what that user may do.
"""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

logger = logging.getLogger(__name__)

ACTOR_HEADER = "X-Acting-User-Login"

# Declared as an API-key scheme so the OpenAPI docs offer an input for it
actor_header = APIKeyHeader(
    name=ACTOR_HEADER,
    auto_error=False,
    description="Login of the user performing the action (e.g. admin).",
)


def get_actor_login_required(login: Optional[str] = Depends(actor_header)) -> str:
    """Get the acting user's login (required). Raises 401 if the header is missing or blank."""
    if not login or not login.strip():
        logger.debug("Request rejected: acting user header missing")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Header {ACTOR_HEADER} is required",
        )
    return login
