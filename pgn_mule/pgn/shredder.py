"""
Shredder-style castling notation.

Rewrites ``O-O`` / ``O-O-O`` in move text as the king moving onto its own
rook's square, named by the rook's file (white ``O-O`` -> ``Kh1``, black
``O-O-O`` -> ``Ka8``). Chess960 games carry their rook files in the FEN
tag, either as Shredder letters (``HAha``) or as ``KQkq`` meaning the
outermost rook on that wing.
"""

import re
from dataclasses import dataclass

_SEGMENT_START = re.compile(r"(?=\[Event )")
_HEADER = re.compile(r"\A(?:[ \t]*\[[^\n]*\][ \t]*(?:\r?\n|\Z))*")
_FEN_TAG = re.compile(r'\[FEN "([^"]*)"\]')

_TOKEN = re.compile(
    r"\{[^}]*\}"        # comment
    r"|;[^\n]*"         # rest-of-line comment
    r"|\$\d+"           # NAG
    r"|[()]"            # variation
    r"|\d*\.+"          # move number / continuation dots
    r"|\s+"
    r"|[^\s{}();.]+"    # move, result, anything else
    r"|.",
    re.DOTALL,
)
_CASTLE = re.compile(r"^(O-O-O|0-0-0|O-O|0-0)([+#]?[!?]*)$")
_MOVE = re.compile(
    r"^(?:[KQRBN]?[a-h]?[1-8]?x?[a-h][1-8](?:=?[QRBN])?|O-O-O|O-O|0-0-0|0-0|--)"
    r"[+#]?[!?]*$"
)


@dataclass
class _CastlingFiles:
    white_king: str = "h"
    white_queen: str = "a"
    black_king: str = "h"
    black_queen: str = "a"
    white_first: bool = True


def _expand_rank(rank: str) -> list[str] | None:
    squares: list[str] = []
    for ch in rank:
        if ch.isdigit():
            squares.extend(["."] * int(ch))
        else:
            squares.append(ch)
    return squares if len(squares) == 8 else None


def _outermost_rook(rank: list[str], rook: str, king_index: int, kingside: bool) -> str | None:
    indices = range(7, king_index, -1) if kingside else range(0, king_index)
    for index in indices:
        if rank[index] == rook:
            return "abcdefgh"[index]
    return None


def _castling_files(game: str) -> _CastlingFiles:
    files = _CastlingFiles()
    match = _FEN_TAG.search(game)
    if not match:
        return files
    fields = match.group(1).split()
    if len(fields) > 1:
        files.white_first = fields[1] != "b"
    ranks = fields[0].split("/") if fields else []
    if len(ranks) != 8 or len(fields) < 3:
        return files

    back_ranks = {"white": _expand_rank(ranks[7]), "black": _expand_rank(ranks[0])}
    for color, king, rook in (("white", "K", "R"), ("black", "k", "r")):
        rank = back_ranks[color]
        if rank is None or king not in rank:
            continue
        king_index = rank.index(king)
        for right in fields[2]:
            own_right = right.isupper() if color == "white" else right.islower()
            if not own_right:
                continue
            letter = right.lower()
            if letter == "k":
                kingside, rook_file = True, _outermost_rook(rank, rook, king_index, True)
            elif letter == "q":
                kingside, rook_file = False, _outermost_rook(rank, rook, king_index, False)
            elif letter in "abcdefgh":
                kingside, rook_file = "abcdefgh".index(letter) > king_index, letter
            else:
                continue
            if rook_file:
                setattr(files, f"{color}_{'king' if kingside else 'queen'}", rook_file)
    return files


def _convert_movetext(movetext: str, files: _CastlingFiles) -> str:
    white_to_move = files.white_first
    stack: list[bool] = []
    out: list[str] = []

    for token in _TOKEN.findall(movetext):
        if token[0] in "{;$" or token.isspace():
            out.append(token)
            continue
        if token == "(":
            stack.append(white_to_move)
            white_to_move = not white_to_move
        elif token == ")":
            if stack:
                white_to_move = stack.pop()
        elif token.endswith("."):
            # "12." puts white on move, "12..." or a bare "..." black
            white_to_move = not token.endswith("...")
        elif _MOVE.match(token):
            castle = _CASTLE.match(token)
            if castle:
                long_castle = castle.group(1).count("-") == 2
                if white_to_move:
                    rook_file = files.white_queen if long_castle else files.white_king
                else:
                    rook_file = files.black_queen if long_castle else files.black_king
                token = f"K{rook_file}{'1' if white_to_move else '8'}{castle.group(2)}"
            white_to_move = not white_to_move
        out.append(token)
    return "".join(out)


def _convert_game(game: str) -> str:
    header = _HEADER.match(game)
    split_at = header.end() if header else 0
    return game[:split_at] + _convert_movetext(game[split_at:], _castling_files(game))


def to_shredder(pgn: str) -> str:
    """Rewrite castling moves of every game; everything else is preserved."""
    if not pgn:
        return pgn
    return "".join(_convert_game(segment) for segment in _SEGMENT_START.split(pgn))
