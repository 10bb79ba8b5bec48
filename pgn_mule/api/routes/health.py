"""
Health check endpoint.
"""

import structlog
from fastapi import APIRouter, Depends

from pgn_mule import __version__
from pgn_mule.api.dependencies import get_relay_service, get_store
from pgn_mule.api.models import HealthResponse
from pgn_mule.services.relay_service import RelayService
from pgn_mule.storage.store import KeyValueStore

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/health", response_model=HealthResponse, summary="Service health")
async def health(
    store: KeyValueStore = Depends(get_store),
    service: RelayService = Depends(get_relay_service),
) -> HealthResponse:
    redis_ok = await store.health_check()
    pollers = len(service.scheduler.active)
    if not redis_ok:
        logger.warning("Health check: Redis unreachable")
    return HealthResponse(
        status="healthy" if redis_ok else "unhealthy",
        version=__version__,
        redis=redis_ok,
        active_pollers=pollers,
    )
