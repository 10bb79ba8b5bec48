"""PGN text pipeline: game splitting, selection and notation conversion."""

from pgn_mule.pgn.games import (
    GAME_MARKER,
    chess24_rounds,
    filter_games,
    game_round,
    join_games,
    parse_slice,
    select_games,
    slice_games,
    split_games,
)
from pgn_mule.pgn.shredder import to_shredder

__all__ = [
    "GAME_MARKER",
    "chess24_rounds",
    "filter_games",
    "game_round",
    "join_games",
    "parse_slice",
    "select_games",
    "slice_games",
    "split_games",
    "to_shredder",
]
