"""
Replacement engine: parsing rules from admin text and applying them.

Rules apply in insertion order, each over the cumulative result of the
previous one, replacing every non-overlapping occurrence.
"""

import logging
import re
from collections.abc import Iterable

from pgn_mule.errors import InvalidReplacementError
from pgn_mule.replacements.schemas import Replacement

logger = logging.getLogger(__name__)

RULE_SEPARATOR = "->"
REGEX_SENTINEL = "r`"

_FENCE = re.compile(r"^`+|`+$")
_TEMPLATE_TOKEN = re.compile(r"\$(\$|&|`|'|\d{1,2})")


def _clean(part: str) -> str:
    return _FENCE.sub("", part.strip()).replace("\\n", "\n")


def expand_template(template: str, match: re.Match) -> str:
    """
    Expand a ``$``-style replacement template against one match.

    ``$$`` is a dollar, ``$&`` the whole match and ``$1``..``$99`` a group
    (empty when it did not participate). A backtick or a quote after ``$``
    gives the text before or after the match. References to missing groups
    and every other character, backslashes included, are kept verbatim.
    """
    groups = match.re.groups

    def expand(token: re.Match) -> str:
        ref = token.group(1)
        if ref == "$":
            return "$"
        if ref == "&":
            return match.group(0)
        if ref == "`":
            return match.string[: match.start()]
        if ref == "'":
            return match.string[match.end():]
        tail = ""
        if len(ref) == 2 and int(ref) > groups:
            ref, tail = ref[0], ref[1]
        index = int(ref)
        if index == 0 or index > groups:
            return token.group(0)
        return (match.group(index) or "") + tail

    return _TEMPLATE_TOKEN.sub(expand, template)


def apply_replacements(text: str, replacements: Iterable[Replacement]) -> str:
    """Fold the ordered rules over text.

    Literal rules match their old content verbatim, regex rules use it as a
    pattern. Both expand ``$`` references in the new content. Rules with an
    empty pattern or an invalid regex are skipped.
    """
    for rule in replacements:
        if not rule.old_content:
            continue
        try:
            pattern = re.compile(rule.old_content if rule.regex else re.escape(rule.old_content))
        except re.error as e:
            logger.warning("Skipping invalid regex replacement %r: %s", rule.old_content, e)
            continue
        text = pattern.sub(lambda m, new=rule.new_content: expand_template(new, m), text)
    return text


def parse_replacement(command_text: str) -> Replacement:
    """
    Parse ``old -> new`` (optionally fenced in backticks).

    A leading ``r``` marks the pattern as a regex. Encoded ``\\n`` become
    real newlines.

    Raises:
        InvalidReplacementError: if the separator is missing.
    """
    text = command_text.strip()
    regex = text.startswith(REGEX_SENTINEL)
    if regex:
        text = text[1:]
    if RULE_SEPARATOR not in text:
        raise InvalidReplacementError(
            f"Expected `old {RULE_SEPARATOR} new`, got: {command_text!r}"
        )
    old, new = text.split(RULE_SEPARATOR, 1)
    return Replacement(old_content=_clean(old), new_content=_clean(new), regex=regex)


def parse_bulk_replacements(text: str) -> list[Replacement]:
    """Parse one literal rule per line, old and new separated by a tab."""
    rules = []
    for line in _FENCE.sub("", text.strip()).split("\n"):
        line = line.strip()
        if not line:
            continue
        old, _, new = line.partition("\t")
        rules.append(Replacement(old_content=old.strip(), new_content=new.strip()))
    return rules


def parse_index_range(selector: str) -> tuple[int, int]:
    """
    Parse ``"3"`` or ``"2-5"`` into an inclusive (start, end) pair.

    Raises:
        InvalidReplacementError: on non-integer bounds.
    """
    parts = selector.strip().split("-")
    try:
        start, end = int(parts[0]), int(parts[-1])
    except ValueError as e:
        raise InvalidReplacementError(f"Invalid replacement index: {selector!r}") from e
    return start, end


def remove_range(
    replacements: list[Replacement], start: int, end: int
) -> list[Replacement]:
    """Drop every rule whose index is within [start, end]."""
    return [r for i, r in enumerate(replacements) if i < start or i > end]
