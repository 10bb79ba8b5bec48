"""Replacements: ordered literal/regex substitutions over feed text."""

from pgn_mule.replacements.engine import apply_replacements, parse_replacement
from pgn_mule.replacements.repository import ReplacementRepository
from pgn_mule.replacements.schemas import Replacement
from pgn_mule.replacements.service import ReplacementService

__all__ = [
    "Replacement",
    "ReplacementRepository",
    "ReplacementService",
    "apply_replacements",
    "parse_replacement",
]
