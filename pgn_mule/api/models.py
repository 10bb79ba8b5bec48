"""
Request and response models for the admin API.
"""

from pydantic import BaseModel, Field

from pgn_mule.replacements.schemas import Replacement
from pgn_mule.sources.schemas import Source


class SourceRequest(BaseModel):
    """Create or replace a source."""

    name: str = Field(..., min_length=1, pattern=r"^[^/\s]+$", description="Public path segment")
    url: str = Field(..., description="Upstream PGN URL")
    update_freq_seconds: int | None = Field(default=None, ge=1, description="Poll interval")
    delay_seconds: int | None = Field(default=None, ge=0, description="Consumer delay")


class SourceItem(BaseModel):
    name: str
    url: str
    exposed_url: str
    update_freq_seconds: int
    delay_seconds: int
    date_last_polled: str
    date_last_updated: str
    history_entries: int

    @classmethod
    def from_source(cls, source: Source, exposed_url: str) -> "SourceItem":
        return cls(
            name=source.name,
            url=source.url,
            exposed_url=exposed_url,
            update_freq_seconds=source.update_freq_seconds,
            delay_seconds=source.delay_seconds,
            date_last_polled=source.date_last_polled.isoformat(),
            date_last_updated=source.date_last_updated.isoformat(),
            history_entries=len(source.history),
        )


class SourcesListResponse(BaseModel):
    sources: list[SourceItem]
    total: int


class RemovedResponse(BaseModel):
    removed: int


class ReplacementRequest(BaseModel):
    """A replacement either as chat-style text or as explicit fields."""

    command: str | None = Field(default=None, description="`old -> new`, r`regex` -> new")
    old_content: str | None = None
    new_content: str = ""
    regex: bool = False


class ReplacementItem(BaseModel):
    index: int
    old_content: str
    new_content: str
    regex: bool

    @classmethod
    def from_replacement(cls, index: int, replacement: Replacement) -> "ReplacementItem":
        return cls(
            index=index,
            old_content=replacement.old_content,
            new_content=replacement.new_content,
            regex=replacement.regex,
        )


class ReplacementsListResponse(BaseModel):
    replacements: list[ReplacementItem]


class CommandRequest(BaseModel):
    text: str = Field(..., min_length=1)


class CommandResponse(BaseModel):
    handled: bool
    reply: str | None = None


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="healthy, degraded or unhealthy")
    version: str
    redis: bool
    active_pollers: int


class ErrorResponse(BaseModel):
    detail: str
