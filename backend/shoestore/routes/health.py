"""
Shoe Store Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer checks.
How:   Sends a `ping` command to MongoDB and reports the aggregate status.
Who:   Called by container health checks and monitoring systems.

Status levels:
    - healthy:   MongoDB answered the ping
    - unhealthy: MongoDB unreachable (still HTTP 200; the body carries the state)
"""

import logging
import time

from fastapi import APIRouter, Depends
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from shoestore import __version__
from shoestore.database import get_shoe_collection, ping
from shoestore.schemas.shoe import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    collection: AsyncCollection = Depends(get_shoe_collection),
) -> HealthResponse:
    """
    Ping MongoDB and return aggregate status with uptime.

    Note that with the default server selection timeout an unreachable
    MongoDB makes this call take up to 30 seconds.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        await ping(collection)
    except PyMongoError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: MongoDB unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
