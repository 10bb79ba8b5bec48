"""Owned access to the ordered replacement list."""

import logging

from pgn_mule.replacements.engine import (
    apply_replacements,
    parse_bulk_replacements,
    parse_index_range,
    parse_replacement,
    remove_range,
)
from pgn_mule.replacements.repository import ReplacementRepository
from pgn_mule.replacements.schemas import Replacement

logger = logging.getLogger(__name__)


class ReplacementService:
    """Read/append/remove contract over the persisted replacement list.

    Every mutation is one read-modify-write of the single list record.
    """

    def __init__(self, repository: ReplacementRepository) -> None:
        self._repo = repository

    async def get_all(self) -> list[Replacement]:
        return await self._repo.get_all()

    async def append(self, rule: Replacement) -> Replacement:
        await self._repo.set_all([*await self._repo.get_all(), rule])
        logger.info("Added replacement %r -> %r (regex=%s)", rule.old_content, rule.new_content, rule.regex)
        return rule

    async def add(self, command_text: str) -> Replacement:
        """Parse and append a single rule."""
        return await self.append(parse_replacement(command_text))

    async def add_bulk(self, text: str) -> list[Replacement]:
        """Parse and append tab-separated literal rules."""
        rules = parse_bulk_replacements(text)
        await self._repo.set_all([*await self._repo.get_all(), *rules])
        logger.info("Added %d replacements", len(rules))
        return rules

    async def remove(self, selector: str) -> int:
        """Remove rules by index or inclusive range. Returns how many went."""
        start, end = parse_index_range(selector)
        current = await self._repo.get_all()
        remaining = remove_range(current, start, end)
        await self._repo.set_all(remaining)
        removed = len(current) - len(remaining)
        logger.info("Removed %d replacements (%s)", removed, selector)
        return removed

    async def apply(self, text: str) -> str:
        return apply_replacements(text, await self._repo.get_all())
