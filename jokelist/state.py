"""UI state of the joke list, as one tagged union instead of loose flags."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence, Tuple, Union

from .models import JokeRecord, ShrunkRecord


@dataclass(frozen=True)
class Idle:
    """Nothing requested yet."""


@dataclass(frozen=True)
class Loading:
    category: str


@dataclass(frozen=True)
class Error:
    message: str


@dataclass(frozen=True)
class Empty:
    """A request finished without an error but produced nothing to show."""


@dataclass(frozen=True)
class Loaded:
    """Records on display.

    ``records`` is homogeneous: all JokeRecord when ``from_cache`` is False,
    all ShrunkRecord when it is True.
    """

    records: Tuple[Union[JokeRecord, ShrunkRecord], ...]
    from_cache: bool
    last_updated: Optional[datetime] = None
    category: Optional[str] = field(default=None)

    @classmethod
    def fresh(cls, records: Sequence[JokeRecord], last_updated: datetime, category: str) -> "Loaded":
        return cls(tuple(records), from_cache=False, last_updated=last_updated, category=category)

    @classmethod
    def cached(
        cls, records: Sequence[ShrunkRecord], last_updated: Optional[datetime], category: str
    ) -> "Loaded":
        return cls(tuple(records), from_cache=True, last_updated=last_updated, category=category)


UiState = Union[Idle, Loading, Error, Empty, Loaded]
