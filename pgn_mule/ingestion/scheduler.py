"""
Poll scheduler - re-fetches every source on an adaptive interval.

Each source has at most one poll task, owned by the scheduler's task map.
A task loops: fetch, append the snapshot, update timestamps, choose the
next interval, sleep. Any restart goes through ``rearm``, which cancels
the source's current task before starting a fresh cycle.

Interval policy:
- inactive (no consumer read) for ``minutes_inactivity_die`` -> retire
- inactive for ``minutes_inactivity_slowdown`` -> max(freq * 4, slow rate)
- otherwise the source's own frequency
"""

import asyncio
from collections.abc import Callable
from datetime import datetime

import structlog

from pgn_mule.config.settings import Settings, get_settings
from pgn_mule.errors import MalformedRecordError
from pgn_mule.history.buffer import utcnow
from pgn_mule.ingestion.http_client import FetchResult, UpstreamClient
from pgn_mule.notifications.channels import Notifier
from pgn_mule.observability.logging import poll_context
from pgn_mule.observability.metrics import get_metrics
from pgn_mule.pgn.games import split_games
from pgn_mule.sources.repository import SourceRepository

logger = structlog.get_logger(__name__)


class PollScheduler:
    """
    Owns one cancellable poll task per source name.

    Usage:
        scheduler = PollScheduler(repository, client, notifier)
        await scheduler.start_all()   # resume every persisted source
        scheduler.rearm("wch-r1")     # after an admin change
        await scheduler.stop()
    """

    def __init__(
        self,
        repository: SourceRepository,
        client: UpstreamClient,
        notifier: Notifier,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._client = client
        self._notifier = notifier
        self._settings = settings or get_settings()
        self._clock = clock
        self._tasks: dict[str, asyncio.Task] = {}
        self._metrics = get_metrics()

    @property
    def active(self) -> list[str]:
        """Names with a live poll task."""
        return sorted(name for name, task in self._tasks.items() if not task.done())

    def rearm(self, name: str) -> asyncio.Task:
        """Cancel any pending cycle for name and start polling it now."""
        self.cancel(name)
        task = asyncio.create_task(self._run(name), name=f"poll_{name}")
        self._tasks[name] = task
        task.add_done_callback(lambda t: self._forget(name, t))
        self._metrics.set_active_pollers(len(self._tasks))
        return task

    def cancel(self, name: str) -> bool:
        """Cancel the poll task for name. Returns True if one was pending."""
        task = self._tasks.pop(name, None)
        self._metrics.set_active_pollers(len(self._tasks))
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def _forget(self, name: str, task: asyncio.Task) -> None:
        if self._tasks.get(name) is task:
            del self._tasks[name]
            self._metrics.set_active_pollers(len(self._tasks))

    async def start_all(self) -> int:
        """Re-arm a fresh cycle for every persisted source."""
        names = await self._repo.names()
        logger.info("Starting sources", count=len(names), sources=names)
        for name in names:
            self.rearm(name)
        return len(names)

    async def stop(self) -> None:
        """Cancel every poll task and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._metrics.set_active_pollers(0)
        logger.info("Poll scheduler stopped", cancelled=len(tasks))

    async def _run(self, name: str) -> None:
        with poll_context(name):
            await self._loop(name)

    async def _loop(self, name: str) -> None:
        while True:
            try:
                interval = await self.poll_once(name)
            except MalformedRecordError:
                logger.error("Stopping poll: unreadable source record", source=name, exc_info=True)
                raise
            except Exception as e:
                interval = float(self._settings.default_update_freq_seconds)
                logger.error("Poll cycle failed", source=name, error=str(e), retry_in=interval)
            if interval is None:
                return
            await asyncio.sleep(interval)

    async def poll_once(self, name: str) -> float | None:
        """
        Run one poll step for name.

        Returns:
            Seconds until the next poll, or None when the source no longer
            exists or has just been retired.
        """
        source = await self._repo.get(name)
        if source is None:
            return None

        result = await self._client.fetch(source.url)
        self._log_result(name, result)
        self._metrics.record_poll(result.outcome)

        # Reload: a feed request may have touched date_last_polled meanwhile
        source = await self._repo.get(name)
        if source is None:
            return None

        now = self._clock()
        source.history.add(result.body if result.status_code == 200 else "", at=now)
        seconds_since_updated = (now - source.date_last_updated).total_seconds()
        source.date_last_updated = now
        await self._repo.save(source)

        minutes_inactive = (now - source.date_last_polled).total_seconds() / 60.0
        if minutes_inactive >= self._settings.minutes_inactivity_die:
            await self._retire(name)
            return None

        freq = float(source.update_freq_seconds)
        if minutes_inactive < self._settings.minutes_inactivity_slowdown:
            return freq

        slow_rate = self._settings.slow_poll_rate_seconds
        interval = max(freq * 4, slow_rate)
        just_slowed = abs(seconds_since_updated - freq) < abs(seconds_since_updated - slow_rate)
        logger.debug(
            "Source inactive, slowing down",
            source=name,
            interval=interval,
            seconds_since_updated=seconds_since_updated,
            just_slowed=just_slowed,
        )
        if just_slowed:
            await self._notifier.say_once(f"{name} Slowing refresh to {interval:g} seconds")
        return interval

    async def _retire(self, name: str) -> None:
        await self._repo.delete(name)
        self._metrics.retirements.inc()
        logger.info("Source removed due to inactivity", source=name)
        await self._notifier.say(f"{name} removed due to inactivity")

    def _log_result(self, name: str, result: FetchResult) -> None:
        if result.ok and result.body:
            logger.info(
                "Polled source",
                source=name,
                games=len(split_games(result.body)),
                bytes=len(result.body),
            )
        elif result.status_code == 404:
            logger.debug("Upstream not found", source=name)
        elif result.error is not None:
            logger.error(
                "Upstream fetch failed",
                source=name,
                status_code=result.status_code,
                error=str(result.error),
            )
        else:
            logger.info("Empty response", source=name)
