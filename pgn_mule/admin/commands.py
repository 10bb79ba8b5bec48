"""
Text-command adapter for the administrative command bus.

The chat transport lives outside this package; it hands message text to
``CommandHandler.handle`` and posts back whatever reply comes out.

Commands (case-insensitive):
    add|set <name> <url> [freq] [delay]
    addmany|add-many <a,b,c> <name{}> <url{}> [freq] [delay]
    remove|rm|del|stop <name>
    list
    clear-all-sources
    replace|addreplacement|add-replacement <old> -> <new>
    replace-multiple|addreplacements|add-replacements <old\\tnew lines>
    replacements|listreplacements|list-replacements
    removereplacement|remove-replacement|... <i|a-b>
    version
"""

from collections.abc import Awaitable, Callable

import structlog

from pgn_mule import __version__
from pgn_mule.errors import PgnMuleError
from pgn_mule.services.formatting import (
    format_many_sources,
    format_source,
    replacements_table,
    sources_table,
)
from pgn_mule.services.relay_service import RelayService

logger = structlog.get_logger(__name__)

REMINDER_PREFIX = "Reminder: "
ACK = "✔"

_ADD = ("add", "set")
_ADD_MANY = ("addmany", "add-many")
_REMOVE = ("remove", "rm", "del", "stop")
_LIST = ("list",)
_CLEAR_ALL = ("clear-all-sources",)
_ADD_REPLACEMENT = ("replace", "addreplacement", "add-replacement")
_ADD_REPLACEMENTS = ("replace-multiple", "addreplacements", "add-replacements")
_LIST_REPLACEMENTS = ("replacements", "listreplacements", "list-replacements")
_REMOVE_REPLACEMENT = (
    "removereplacement",
    "remove-replacement",
    "delreplacement",
    "del-replacement",
    "rmreplacement",
    "rm-replacement",
)
_VERSION = ("version",)

# Commands that create or reconfigure sources
SOURCE_COMMANDS = _ADD + _ADD_MANY


def _int_arg(parts: list[str], index: int) -> int | None:
    if len(parts) <= index:
        return None
    try:
        return int(parts[index])
    except ValueError as e:
        raise PgnMuleError(f"Expected a number, got {parts[index]!r}") from e


class CommandHandler:
    """Parses admin text commands and runs them against the relay service."""

    def __init__(self, service: RelayService) -> None:
        self._service = service

    async def handle(self, text: str) -> str | None:
        """
        Run one command.

        Returns:
            Reply text, or None when the message is not a known command.
        """
        text = text.strip()
        if text.startswith(REMINDER_PREFIX):
            text = text[len(REMINDER_PREFIX):]
        parts = text.split()
        if not parts:
            return None
        command = parts[0].lower()
        rest = text[len(parts[0]):].strip()

        handler = self._dispatch(command, parts)
        if handler is None:
            logger.debug("Unprocessed command", command=command)
            return None

        logger.info("Processing command", command=command, args=parts[1:])
        try:
            return await handler(parts, rest)
        except PgnMuleError as e:
            logger.warning("Command rejected", command=command, error=str(e))
            return str(e)

    def _dispatch(
        self, command: str, parts: list[str]
    ) -> Callable[[list[str], str], Awaitable[str]] | None:
        n = len(parts)
        if command in _ADD and 2 < n < 6:
            return self._add
        if command in _ADD_MANY and 3 < n < 7:
            return self._add_many
        if command in _REMOVE and n == 2:
            return self._remove
        if command in _LIST and n == 1:
            return self._list
        if command in _CLEAR_ALL and n == 1:
            return self._clear_all
        if command in _ADD_REPLACEMENT and n > 1:
            return self._add_replacement
        if command in _ADD_REPLACEMENTS and n > 1:
            return self._add_replacements
        if command in _LIST_REPLACEMENTS and n == 1:
            return self._list_replacements
        if command in _REMOVE_REPLACEMENT and n == 2:
            return self._remove_replacement
        if command in _VERSION:
            return self._version
        return None

    async def _add(self, parts: list[str], rest: str) -> str:
        source = await self._service.create_or_update_source(
            parts[1], parts[2], _int_arg(parts, 3), _int_arg(parts, 4)
        )
        return format_source(source, self._service.settings)

    async def _add_many(self, parts: list[str], rest: str) -> str:
        result = await self._service.add_many(
            parts[1], parts[2], parts[3], _int_arg(parts, 4), _int_arg(parts, 5)
        )
        lines = [format_many_sources(result.created, self._service.settings)]
        lines.extend(f"{name}: {error}" for name, error in result.failed.items())
        return "\n".join(lines)

    async def _remove(self, parts: list[str], rest: str) -> str:
        await self._service.remove_source(parts[1])
        return ACK

    async def _list(self, parts: list[str], rest: str) -> str:
        return sources_table(await self._service.list_sources(), self._service.settings)

    async def _clear_all(self, parts: list[str], rest: str) -> str:
        count = await self._service.clear_all_sources()
        return f"Cleared {count} sources"

    async def _add_replacement(self, parts: list[str], rest: str) -> str:
        await self._service.replacements.add(rest)
        return ACK

    async def _add_replacements(self, parts: list[str], rest: str) -> str:
        # Tabs separate old from new, so use the raw text rather than parts
        await self._service.replacements.add_bulk(rest)
        return ACK

    async def _list_replacements(self, parts: list[str], rest: str) -> str:
        return replacements_table(await self._service.replacements.get_all())

    async def _remove_replacement(self, parts: list[str], rest: str) -> str:
        await self._service.replacements.remove(parts[1])
        return ACK

    async def _version(self, parts: list[str], rest: str) -> str:
        return f"Version: {__version__}"
