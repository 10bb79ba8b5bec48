"""Storage layer: Redis-backed key-value store."""

from pgn_mule.storage.store import KeyValueStore

__all__ = ["KeyValueStore"]
