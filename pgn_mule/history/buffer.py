"""
Append-only snapshot log queryable "as of a delay".

Every poll appends the raw upstream text with its capture time. A read
with delay ``d`` returns the newest snapshot that is at least ``d``
seconds old, so consumers with different delays see consistent,
monotonically advancing views of the same source.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class HistoryEntry:
    """A timestamped raw snapshot."""

    timestamp: datetime
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"timestamp": self.timestamp.isoformat(), "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        timestamp = datetime.fromisoformat(data["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(timestamp=timestamp, content=data.get("content") or "")


class PgnHistory:
    """
    Delayed history buffer owned by a single source.

    Entries are kept in append order. On each add, entries older than the
    newest one already past the buffer's own delay horizon are dropped;
    that entry is kept because it is what a delayed read returns.
    """

    def __init__(
        self,
        entries: Iterable[HistoryEntry] = (),
        delay_seconds: float = 0,
    ):
        self._entries: list[HistoryEntry] = list(entries)
        self.delay_seconds = delay_seconds

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, content: str, at: datetime | None = None) -> None:
        """Append a snapshot captured at ``at`` (default: now)."""
        at = at or utcnow()
        self._entries.append(HistoryEntry(timestamp=at, content=content or ""))
        self._trim(at)

    def get_with_delay(
        self, delay_seconds: float, now: datetime | None = None
    ) -> str | None:
        """
        Content of the newest entry at least ``delay_seconds`` old.

        Returns None when no entry is old enough yet.
        """
        index = self._newest_index_before(delay_seconds, now or utcnow())
        return None if index is None else self._entries[index].content

    def _newest_index_before(self, delay_seconds: float, now: datetime) -> int | None:
        # Largest timestamp wins; on ties the later append wins.
        best: int | None = None
        for index, entry in enumerate(self._entries):
            if (now - entry.timestamp).total_seconds() < delay_seconds:
                continue
            if best is None or entry.timestamp >= self._entries[best].timestamp:
                best = index
        return best

    def _trim(self, now: datetime) -> None:
        index = self._newest_index_before(self.delay_seconds, now)
        if index is None:
            return
        horizon = self._entries[index].timestamp
        self._entries = [e for e in self._entries if e.timestamp >= horizon]

    def to_json(self) -> list[dict[str, str]]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_json(
        cls, entries: Iterable[dict[str, Any]], delay_seconds: float = 0
    ) -> "PgnHistory":
        return cls(
            entries=[HistoryEntry.from_dict(e) for e in entries],
            delay_seconds=delay_seconds,
        )
