"""Key-value repository for the sources."""

import logging

from pgn_mule.errors import MalformedRecordError
from pgn_mule.sources.schemas import Source, source_from_json, source_to_json
from pgn_mule.storage.store import KeyValueStore

logger = logging.getLogger(__name__)

SOURCE_PREFIX = "source:"


class SourceRepository:
    """CRUD operations for sources stored under ``source:<name>``."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @staticmethod
    def key(name: str) -> str:
        return f"{SOURCE_PREFIX}{name}"

    async def get(self, name: str) -> Source | None:
        """Fetch a single source by name."""
        raw = await self._store.get(self.key(name))
        if not raw:
            return None
        try:
            return source_from_json(raw, self.key(name))
        except MalformedRecordError:
            logger.error("Unreadable source record %s: %r", self.key(name), raw[:200])
            raise

    async def save(self, source: Source) -> None:
        """Insert or replace a source."""
        await self._store.set(self.key(source.name), source_to_json(source))

    async def delete(self, name: str) -> bool:
        """Delete a source. Returns True if a record was removed."""
        return await self._store.delete(self.key(name))

    async def names(self) -> list[str]:
        """Names of all persisted sources, sorted."""
        keys = await self._store.keys(SOURCE_PREFIX)
        return sorted(k[len(SOURCE_PREFIX):] for k in keys)

    async def list_all(self) -> list[Source]:
        """All persisted sources, sorted by name."""
        sources = []
        for name in await self.names():
            source = await self.get(name)
            if source is not None:
                sources.append(source)
        logger.debug("Loaded %d sources", len(sources))
        return sources
