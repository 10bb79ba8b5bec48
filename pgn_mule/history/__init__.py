"""Delayed history buffer for polled PGN snapshots."""

from pgn_mule.history.buffer import HistoryEntry, PgnHistory

__all__ = ["HistoryEntry", "PgnHistory"]
