"""Human-readable renderings for administrative acknowledgements."""

from collections.abc import Sequence

from pgn_mule.config.settings import Settings
from pgn_mule.replacements.schemas import Replacement
from pgn_mule.sources.schemas import Source


def markdown_table(rows: Sequence[Sequence[str]]) -> str:
    """Render rows as a markdown table; the first row is the header."""
    if not rows:
        return ""
    header, *body = rows
    lines = [
        "| " + " | ".join(header) + " |",
        "|" + "|".join("---" for _ in header) + "|",
    ]
    lines.extend("| " + " | ".join(row) + " |" for row in body)
    return "\n".join(lines)


def markdown_pre(text: str) -> str:
    return f"`{text}`" if text else ""


def exposed_url(settings: Settings, *names: str) -> str:
    return f"{settings.public_base_url}/{'/'.join(names)}"


def format_source(source: Source, settings: Settings) -> str:
    return "\n".join([
        f"`{source.name}`",
        f"Source URL: {source.url}",
        f"Exposed URL: {exposed_url(settings, source.name)}",
        f"Update frequency: once every {source.update_freq_seconds} seconds",
        f"Delay: {source.delay_seconds} seconds",
    ])


def format_many_sources(sources: Sequence[Source], settings: Settings) -> str:
    return f"all of them -> {exposed_url(settings, *(s.name for s in sources))}"


def sources_table(sources: Sequence[Source], settings: Settings) -> str:
    if not sources:
        return "No active sources"
    return markdown_table([
        ["Name", "Destination", "Freq", "Delay", "Source"],
        *[
            [
                s.name,
                exposed_url(settings, s.name),
                f"1/{s.update_freq_seconds}s",
                f"{s.delay_seconds}s",
                s.url,
            ]
            for s in sources
        ],
    ])


def replacements_table(replacements: Sequence[Replacement]) -> str:
    return markdown_table([
        ["ID", "From", "To", "Regex"],
        *[
            [str(i), markdown_pre(r.old_content), markdown_pre(r.new_content), "regex" if r.regex else ""]
            for i, r in enumerate(replacements)
        ],
    ])
