"""Sources: mirrored upstream feeds and their persistence."""

from pgn_mule.sources.repository import SourceRepository
from pgn_mule.sources.schemas import Source, source_from_json, source_to_json

__all__ = [
    "Source",
    "SourceRepository",
    "source_from_json",
    "source_to_json",
]
