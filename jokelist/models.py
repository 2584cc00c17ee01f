"""Joke record shapes: the full record from the API and the shrunk cache copy."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

SINGLE = "single"
TWOPART = "twopart"

SUMMARY_LENGTH = 50
ELLIPSIS = "..."


def _text_or_none(value: Any) -> Optional[str]:
    # Absent and empty both count as "not populated".
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class JokeRecord:
    """A joke exactly as displayed after a fresh API fetch."""

    id: Optional[int]
    category: Optional[str]
    type: Optional[str]
    joke: Optional[str] = None
    setup: Optional[str] = None
    delivery: Optional[str] = None
    flags: Dict[str, bool] = field(default_factory=dict)
    safe: Optional[bool] = None
    lang: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "JokeRecord":
        """Build a record from one raw API joke object; missing fields never raise."""
        raw_id = raw.get("id")
        try:
            joke_id = int(raw_id) if raw_id is not None else None
        except (TypeError, ValueError):
            joke_id = None
        flags = raw.get("flags")
        safe = raw.get("safe")
        return cls(
            id=joke_id,
            category=raw.get("category"),
            type=raw.get("type"),
            joke=_text_or_none(raw.get("joke")),
            setup=_text_or_none(raw.get("setup")),
            delivery=_text_or_none(raw.get("delivery")),
            flags={str(k): bool(v) for k, v in flags.items()} if isinstance(flags, Mapping) else {},
            safe=bool(safe) if safe is not None else None,
            lang=raw.get("lang"),
        )

    @property
    def active_flags(self) -> List[str]:
        return [name for name, on in self.flags.items() if on]

    def shrink(self) -> "ShrunkRecord":
        return ShrunkRecord.from_record(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "type": self.type,
            "joke": self.joke,
            "setup": self.setup,
            "delivery": self.delivery,
            "flags": dict(self.flags),
            "safe": self.safe,
            "lang": self.lang,
        }


@dataclass(frozen=True)
class ShrunkRecord:
    """Reduced, display-only projection kept in the persistent cache."""

    id: Optional[int]
    summary: str
    category: Optional[str]
    type: Optional[str]

    @classmethod
    def from_record(cls, record: JokeRecord) -> "ShrunkRecord":
        return cls(
            id=record.id,
            summary=summarize(record),
            category=record.category,
            type=record.type,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShrunkRecord":
        """Rebuild from cached JSON. Raises ValueError on a malformed entry."""
        if not isinstance(data, Mapping) or "summary" not in data:
            raise ValueError(f"not a shrunk joke record: {data!r}")
        return cls(
            id=data.get("id"),
            summary=str(data["summary"]),
            category=data.get("category"),
            type=data.get("type"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "summary": self.summary,
            "category": self.category,
            "type": self.type,
        }


def summarize(record: JokeRecord) -> str:
    """First SUMMARY_LENGTH chars of the setup (twopart) or text (single), plus '...'."""
    source = record.setup if record.type == TWOPART else record.joke
    return (source or "")[:SUMMARY_LENGTH] + ELLIPSIS
