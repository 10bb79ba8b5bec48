"""
Game pipeline: split concatenated PGN, filter by round, slice, remap rounds.

Games are opaque text blocks that start with the ``[Event `` tag. Every
function here is total: malformed input gives an empty or unchanged
result, never an exception.
"""

import re
from collections.abc import Sequence

GAME_MARKER = "[Event "
GAME_SEPARATOR = "\n\n"

_ROUND_TAG = re.compile(r'\[Round "([^"]*)"\]')
_EVENT_LINE = re.compile(r'\[Event [^\n]*\n?')


def split_games(text: str | None) -> list[str]:
    """Split concatenated PGN into games, dropping any text before the first."""
    if not text:
        return []
    fragments = text.split(GAME_MARKER)[1:]
    return [(GAME_MARKER + fragment).strip() for fragment in fragments]


def join_games(games: Sequence[str]) -> str:
    return GAME_SEPARATOR.join(games)


def game_round(game: str) -> str | None:
    """Value of the game's Round tag, if any."""
    match = _ROUND_TAG.search(game)
    return match.group(1) if match else None


def filter_games(games: Sequence[str], round: str | None = None) -> list[str]:
    """
    Keep games of the given round.

    A selector of ``3`` matches ``[Round "3"]`` as well as board-suffixed
    labels such as ``[Round "3.1"]``, but not ``[Round "30"]``.
    """
    if not round:
        return list(games)
    prefix = f"{round}."
    kept = []
    for game in games:
        value = game_round(game)
        if value is not None and (value == round or value.startswith(prefix)):
            kept.append(game)
    return kept


def parse_slice(selector: str) -> slice | None:
    """
    Parse a 1-based inclusive ``start-end`` or ``start`` selector.

    ``start-end`` selects games start..end; a lone ``start`` selects the
    first ``start`` games. Returns None when the selector is malformed.
    """
    parts = selector.strip().split("-")
    if len(parts) > 2:
        return None
    try:
        start = int(parts[0])
        end = int(parts[1]) if len(parts) == 2 and parts[1].strip() else 0
    except ValueError:
        return None
    if start < 0 or end < 0:
        return None
    if end:
        return slice(max(start - 1, 0), end)
    return slice(0, start)


def slice_games(games: Sequence[str], selector: str | None = None) -> list[str]:
    if not selector:
        return list(games)
    selected = parse_slice(selector)
    if selected is None:
        return []
    return list(games[selected])


def chess24_rounds(games: Sequence[str], round_base: str | int) -> list[str]:
    """
    Renumber rounds contiguously from ``round_base``.

    Game ``i`` (0-based) gets ``[Round "<round_base + i>"]``. A game without
    a Round tag gets one right after its Event tag. A non-integer base
    leaves the games unchanged.
    """
    try:
        base = int(str(round_base).strip())
    except ValueError:
        return list(games)

    remapped = []
    for index, game in enumerate(games):
        tag = f'[Round "{base + index}"]'
        if _ROUND_TAG.search(game):
            game = _ROUND_TAG.sub(lambda _: tag, game, count=1)
        else:
            event = _EVENT_LINE.match(game)
            if event:
                head = event.group(0)
                if not head.endswith("\n"):
                    head += "\n"
                game = f"{head}{tag}\n{game[event.end():]}".rstrip("\n")
            else:
                game = f"{tag}\n{game}"
        remapped.append(game)
    return remapped


def select_games(
    text: str,
    round: str | None = None,
    slice: str | None = None,
    round_base: str | None = None,
) -> str:
    """Run the fixed pipeline: split, round filter, slice, round remap, join."""
    games = filter_games(split_games(text), round)
    games = slice_games(games, slice)
    if round_base is not None and round_base != "":
        games = chess24_rounds(games, round_base)
    return join_games(games)
