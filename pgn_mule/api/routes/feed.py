"""
Aggregated feed endpoint.

``GET /<name>[/<name>...]`` merges the delayed snapshots of the named
sources, in path order, and returns them as one PGN text body.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from pgn_mule.api.dependencies import get_relay_service
from pgn_mule.services.relay_service import FeedQuery, RelayService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "Hello World"


@router.get("/favicon.ico", include_in_schema=False)
async def favicon() -> None:
    raise HTTPException(status_code=404)


@router.get(
    "/{names:path}",
    response_class=PlainTextResponse,
    summary="Merged PGN of one or more sources",
)
async def feed(
    names: str,
    round: str | None = Query(default=None, description="Keep only this round"),
    slice: str | None = Query(default=None, description="`start` or `start-end`, 1-based"),
    roundbase: str | None = Query(default=None, description="Renumber rounds from this base"),
    shredder: str | None = Query(default=None, description="`1` converts castling notation"),
    service: RelayService = Depends(get_relay_service),
) -> PlainTextResponse:
    source_names = [n for n in names.split("/") if n]
    pgn = await service.feed(
        source_names,
        FeedQuery(round=round, slice=slice, roundbase=roundbase, shredder=shredder == "1"),
    )
    logger.info("Feed served", sources=source_names, length=len(pgn))
    return PlainTextResponse(pgn)
