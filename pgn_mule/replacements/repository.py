"""Key-value repository for the process-wide replacement list."""

import json

from pgn_mule.errors import MalformedRecordError
from pgn_mule.replacements.schemas import Replacement
from pgn_mule.storage.store import KeyValueStore

REPLACEMENTS_KEY = "replacements"


class ReplacementRepository:
    """Persists the ordered replacement list as a single record."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def get_all(self) -> list[Replacement]:
        raw = await self._store.get(REPLACEMENTS_KEY)
        if not raw:
            return []
        try:
            return [Replacement.from_dict(r) for r in json.loads(raw)]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise MalformedRecordError(REPLACEMENTS_KEY, f"{type(e).__name__}: {e}") from e

    async def set_all(self, replacements: list[Replacement]) -> None:
        await self._store.set(
            REPLACEMENTS_KEY, json.dumps([r.to_dict() for r in replacements])
        )
