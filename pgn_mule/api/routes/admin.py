"""Admin endpoints - source and replacement management, text commands."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from pgn_mule import __version__
from pgn_mule.admin.commands import CommandHandler
from pgn_mule.api.dependencies import get_command_handler, get_relay_service
from pgn_mule.api.models import (
    CommandRequest,
    CommandResponse,
    ErrorResponse,
    RemovedResponse,
    ReplacementItem,
    ReplacementRequest,
    ReplacementsListResponse,
    SourceItem,
    SourceRequest,
    SourcesListResponse,
)
from pgn_mule.replacements.schemas import Replacement
from pgn_mule.services.formatting import exposed_url
from pgn_mule.services.relay_service import RelayService
from pgn_mule.sources.schemas import Source

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/admin")


def _source_item(source: Source, service: RelayService) -> SourceItem:
    return SourceItem.from_source(source, exposed_url(service.settings, source.name))


@router.get("/sources", response_model=SourcesListResponse, summary="List sources")
async def list_sources(
    service: RelayService = Depends(get_relay_service),
) -> SourcesListResponse:
    sources = await service.list_sources()
    return SourcesListResponse(
        sources=[_source_item(s, service) for s in sources],
        total=len(sources),
    )


@router.put(
    "/sources",
    response_model=SourceItem,
    responses={400: {"model": ErrorResponse}},
    summary="Create or replace a source",
)
async def put_source(
    request: SourceRequest,
    service: RelayService = Depends(get_relay_service),
) -> SourceItem:
    source = await service.create_or_update_source(
        request.name,
        request.url,
        request.update_freq_seconds,
        request.delay_seconds,
    )
    return _source_item(source, service)


@router.delete(
    "/sources/{name}",
    response_model=RemovedResponse,
    summary="Stop polling and delete a source",
)
async def delete_source(
    name: str,
    service: RelayService = Depends(get_relay_service),
) -> RemovedResponse:
    removed = await service.remove_source(name)
    return RemovedResponse(removed=int(removed))


@router.delete("/sources", response_model=RemovedResponse, summary="Delete every source")
async def clear_sources(
    service: RelayService = Depends(get_relay_service),
) -> RemovedResponse:
    return RemovedResponse(removed=await service.clear_all_sources())


@router.get(
    "/replacements",
    response_model=ReplacementsListResponse,
    summary="List replacements in application order",
)
async def list_replacements(
    service: RelayService = Depends(get_relay_service),
) -> ReplacementsListResponse:
    rules = await service.replacements.get_all()
    return ReplacementsListResponse(
        replacements=[ReplacementItem.from_replacement(i, r) for i, r in enumerate(rules)]
    )


@router.post(
    "/replacements",
    response_model=ReplacementItem,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Append a replacement",
)
async def add_replacement(
    request: ReplacementRequest,
    service: RelayService = Depends(get_relay_service),
) -> ReplacementItem:
    if request.command is not None:
        rule = await service.replacements.add(request.command)
    elif request.old_content:
        rule = await service.replacements.append(
            Replacement(request.old_content, request.new_content, request.regex)
        )
    else:
        raise HTTPException(status_code=400, detail="Either command or old_content is required")
    index = len(await service.replacements.get_all()) - 1
    return ReplacementItem.from_replacement(index, rule)


@router.delete(
    "/replacements/{selector}",
    response_model=RemovedResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Remove replacements by index or inclusive range (`2-5`)",
)
async def remove_replacements(
    selector: str,
    service: RelayService = Depends(get_relay_service),
) -> RemovedResponse:
    return RemovedResponse(removed=await service.replacements.remove(selector))


@router.post("/command", response_model=CommandResponse, summary="Run a text command")
async def run_command(
    request: CommandRequest,
    handler: CommandHandler = Depends(get_command_handler),
) -> CommandResponse:
    reply = await handler.handle(request.text)
    return CommandResponse(handled=reply is not None, reply=reply)


@router.get("/version", summary="Relay version")
async def version() -> dict[str, str]:
    return {"version": __version__}
