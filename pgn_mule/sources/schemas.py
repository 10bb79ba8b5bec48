"""Data models for the sources module."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pgn_mule.errors import MalformedRecordError
from pgn_mule.history.buffer import PgnHistory, utcnow


@dataclass
class Source:
    """An upstream PGN feed being mirrored.

    ``name`` is both the store key and the public URL path segment.
    ``date_last_polled`` is touched when a consumer reads the feed,
    ``date_last_updated`` on every poll attempt.
    """

    name: str
    url: str
    update_freq_seconds: int = 10
    delay_seconds: int = 0
    history: PgnHistory = field(default_factory=PgnHistory)
    date_last_polled: datetime = field(default_factory=utcnow)
    date_last_updated: datetime = field(default_factory=utcnow)


def _parse_date(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def source_to_json(source: Source) -> str:
    """Serialize a source with its full history."""
    return json.dumps({
        "name": source.name,
        "url": source.url,
        "updateFreqSeconds": source.update_freq_seconds,
        "delaySeconds": source.delay_seconds,
        "dateLastPolled": source.date_last_polled.isoformat(),
        "dateLastUpdated": source.date_last_updated.isoformat(),
        "pgnHistory": source.history.to_json(),
    })


def source_from_json(raw: str, key: str = "source") -> Source:
    """
    Decode a persisted source.

    Raises:
        MalformedRecordError: if the record is not valid JSON or lacks
            required fields. No default is ever substituted.
    """
    try:
        data = json.loads(raw)
        delay_seconds = int(data.get("delaySeconds") or 0)
        return Source(
            name=data["name"],
            url=data["url"],
            update_freq_seconds=max(int(data["updateFreqSeconds"]), 1),
            delay_seconds=delay_seconds,
            history=PgnHistory.from_json(data.get("pgnHistory") or [], delay_seconds),
            date_last_polled=_parse_date(data["dateLastPolled"]),
            date_last_updated=_parse_date(data["dateLastUpdated"]),
        )
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise MalformedRecordError(key, f"{type(e).__name__}: {e}") from e
