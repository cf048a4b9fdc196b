"""Liveness and store-reachability check."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from adapter.mongodb.connection import DATABASE_NAME, get_mongodb_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """200 while MongoDB answers ping, 503 otherwise."""
    # get_mongodb_client() pings before returning a client
    store_up = get_mongodb_client() is not None

    if not store_up:
        logger.warning("Health check degraded", extra={"database": DATABASE_NAME})

    return JSONResponse(
        status_code=status.HTTP_200_OK if store_up else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if store_up else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "services": {
                "mongodb": {
                    "status": "healthy" if store_up else "unhealthy",
                    "database": DATABASE_NAME,
                },
            },
        },
    )
