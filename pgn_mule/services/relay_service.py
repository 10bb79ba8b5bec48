"""
Relay service - administrative source operations and feed aggregation.

Administrative operations validate input before touching the store, so a
rejected command never mutates state. Feed aggregation reads each
source's delayed snapshot and runs the game pipeline, the replacement
engine and, on request, the Shredder conversion.
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

import structlog
from pydantic import HttpUrl, TypeAdapter, ValidationError

from pgn_mule.config.settings import Settings, get_settings
from pgn_mule.errors import DelayLimitExceededError, InvalidURLError, PgnMuleError
from pgn_mule.history.buffer import PgnHistory, utcnow
from pgn_mule.ingestion.scheduler import PollScheduler
from pgn_mule.observability.metrics import get_metrics
from pgn_mule.pgn.games import GAME_SEPARATOR, select_games
from pgn_mule.pgn.shredder import to_shredder
from pgn_mule.replacements.service import ReplacementService
from pgn_mule.sources.repository import SourceRepository
from pgn_mule.sources.schemas import Source

logger = structlog.get_logger(__name__)

_HTTP_URL = TypeAdapter(HttpUrl)


def normalize_url(url: str) -> str:
    """Strip chat-style ``<...>`` wrapping and validate the URL."""
    url = url.strip()
    if url.startswith("<"):
        url = url[1:]
    if url.endswith(">"):
        url = url[:-1]
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError as e:
        raise InvalidURLError(f"{url} is not a valid URL") from e
    return url


@dataclass
class FeedQuery:
    """Query parameters of an aggregated feed request."""

    round: str | None = None
    slice: str | None = None
    roundbase: str | None = None
    shredder: bool = False


@dataclass
class AddManyResult:
    created: list[Source] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class RelayService:
    """
    Facade over sources, replacements and the poll scheduler.

    Usage:
        service = RelayService(repository, replacements, scheduler)
        await service.create_or_update_source("wch", "https://example.com/wch.pgn")
        pgn = await service.feed(["wch"], FeedQuery(round="3"))
    """

    def __init__(
        self,
        repository: SourceRepository,
        replacements: ReplacementService,
        scheduler: PollScheduler,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
        arm_polling: bool = True,
    ):
        self._repo = repository
        self._replacements = replacements
        self._scheduler = scheduler
        # Off in one-shot CLI runs, where nothing outlives the command
        self.arm_polling = arm_polling
        self._settings = settings or get_settings()
        self._clock = clock
        self._metrics = get_metrics()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def replacements(self) -> ReplacementService:
        return self._replacements

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    # ── Sources ─────────────────────────────────────────────────

    async def create_or_update_source(
        self,
        name: str,
        url: str,
        update_freq_seconds: int | None = None,
        delay_seconds: int | None = None,
    ) -> Source:
        """
        Create a source or replace its configuration, then poll it now
        (unless ``arm_polling`` is off).

        The history survives only when the URL is unchanged.

        Raises:
            DelayLimitExceededError: delay outside [0, DELAY_MAX_SECONDS]
            InvalidURLError: url is not an absolute http(s) URL
        """
        if update_freq_seconds is None:
            update_freq_seconds = self._settings.default_update_freq_seconds
        delay_seconds = delay_seconds or 0
        max_delay = self._settings.delay_max_seconds
        if delay_seconds < 0 or delay_seconds > max_delay:
            raise DelayLimitExceededError(f"Delay must be <= {max_delay}")
        url = normalize_url(url)

        previous = await self._repo.get(name)
        keep_history = previous is not None and previous.url == url
        if keep_history:
            history = previous.history
            history.delay_seconds = delay_seconds
        else:
            history = PgnHistory([], delay_seconds)

        now = self._clock()
        source = Source(
            name=name,
            url=url,
            update_freq_seconds=max(update_freq_seconds, 1),
            delay_seconds=delay_seconds,
            history=history,
            date_last_polled=now,
            date_last_updated=now,
        )
        await self._repo.save(source)
        if self.arm_polling:
            self._scheduler.rearm(name)
        logger.info(
            "Source saved",
            source=name,
            url=url,
            freq=source.update_freq_seconds,
            delay=delay_seconds,
            kept_history=keep_history,
        )
        return source

    async def add_many(
        self,
        variables: str,
        name_template: str,
        url_template: str,
        update_freq_seconds: int | None = None,
        delay_seconds: int | None = None,
    ) -> AddManyResult:
        """Create one source per comma-separated variable, filling ``{}``."""
        result = AddManyResult()
        for variable in variables.split(","):
            name = name_template.replace("{}", variable, 1)
            url = url_template.replace("{}", variable, 1)
            try:
                source = await self.create_or_update_source(
                    name, url, update_freq_seconds, delay_seconds
                )
            except PgnMuleError as e:
                result.failed[name] = str(e)
                continue
            result.created.append(source)
        return result

    async def remove_source(self, name: str) -> bool:
        """Stop polling and delete a source. Unknown names are a no-op."""
        self._scheduler.cancel(name)
        removed = await self._repo.delete(name)
        logger.info("Source removed", source=name, existed=removed)
        return removed

    async def list_sources(self) -> list[Source]:
        return await self._repo.list_all()

    async def clear_all_sources(self) -> int:
        names = await self._repo.names()
        for name in names:
            await self.remove_source(name)
        logger.info("Cleared all sources", count=len(names))
        return len(names)

    # ── Feed ────────────────────────────────────────────────────

    async def feed(self, names: Sequence[str], query: FeedQuery | None = None) -> str:
        """
        Compose the delayed, filtered, transformed PGN of several sources.

        Unknown names are skipped. Every found source has its
        date_last_polled touched, which keeps it from being retired.
        """
        query = query or FeedQuery()
        start = time.perf_counter()
        now = self._clock()

        snapshots: list[str] = []
        for name in names:
            if not name:
                continue
            source = await self._repo.get(name)
            if source is None:
                continue
            source.date_last_polled = now
            await self._repo.save(source)
            snapshot = source.history.get_with_delay(source.delay_seconds, now=now)
            if snapshot:
                snapshots.append(snapshot)

        pgn = select_games(
            GAME_SEPARATOR.join(snapshots),
            round=query.round,
            slice=query.slice,
            round_base=query.roundbase,
        )
        pgn = await self._replacements.apply(pgn)
        if query.shredder:
            pgn = to_shredder(pgn)

        self._metrics.feed_requests.inc()
        self._metrics.feed_latency.observe(time.perf_counter() - start)
        return pgn
