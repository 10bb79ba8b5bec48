"""Data models for text replacements."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Replacement:
    """An ordered substitution rule.

    When ``regex`` is False, ``old_content`` is matched literally.
    """

    old_content: str
    new_content: str
    regex: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "oldContent": self.old_content,
            "newContent": self.new_content,
        }
        if self.regex:
            data["regex"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Replacement":
        return cls(
            old_content=data["oldContent"],
            new_content=data.get("newContent") or "",
            regex=bool(data.get("regex", False)),
        )
