"""List rendering: the visible window of a fixed-row-height list and row contents.

Shared by the web page and the CLI. Only rows inside the viewport (plus a small
overscan) are materialized, whatever the length of the list.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple, Union

from .config import DEFAULT_LIST_HEIGHT, DEFAULT_ROW_HEIGHT
from .models import TWOPART, JokeRecord, ShrunkRecord
from .state import Error, Loaded, Loading, UiState

LOADING = "loading"
ERROR = "error"
EMPTY = "empty"
LIST = "list"

CACHE_LABEL = "Data loaded from local cache (limited attributes)"
API_LABEL = "Data fetched from API (full attributes)"
EMPTY_MESSAGE = "No jokes found in the selected category"
LOADING_MESSAGE = "Loading jokes..."


@dataclass(frozen=True)
class RowView:
    """Display content of one list row."""

    index: int
    top: int
    lines: Tuple[str, ...]
    category: Optional[str]
    id: Optional[int]
    type: Optional[str] = None
    flags: Optional[str] = None

    @property
    def meta(self) -> List[str]:
        out = [f"Category: {self.category}", f"ID: {self.id}"]
        if self.type is not None:
            out.append(f"Type: {self.type}")
        if self.flags:
            out.append(f"Flags: {self.flags}")
        return out


@dataclass(frozen=True)
class ListWindow:
    start: int
    stop: int
    scroll_offset: int
    total_height: int
    height: int
    rows: List[RowView] = field(default_factory=list)


class VirtualList:
    """Fixed-size virtual list: ``height`` px viewport, ``row_height`` px rows."""

    def __init__(self, height: int = DEFAULT_LIST_HEIGHT, row_height: int = DEFAULT_ROW_HEIGHT, overscan: int = 1):
        if height <= 0 or row_height <= 0:
            raise ValueError("height and row_height must be positive")
        self.height = int(height)
        self.row_height = int(row_height)
        self.overscan = max(0, int(overscan))

    def total_height(self, item_count: int) -> int:
        return max(0, item_count) * self.row_height

    def clamp_offset(self, item_count: int, scroll_offset: int) -> int:
        max_offset = max(self.total_height(item_count) - self.height, 0)
        return min(max(0, int(scroll_offset)), max_offset)

    def visible_range(self, item_count: int, scroll_offset: int = 0) -> range:
        if item_count <= 0:
            return range(0)
        offset = self.clamp_offset(item_count, scroll_offset)
        first = offset // self.row_height
        last = (offset + self.height - 1) // self.row_height
        start = max(0, first - self.overscan)
        stop = min(item_count, last + 1 + self.overscan)
        return range(start, stop)

    def window(
        self,
        jokes: Sequence[Union[JokeRecord, ShrunkRecord]],
        from_cache: bool,
        scroll_offset: int = 0,
    ) -> ListWindow:
        offset = self.clamp_offset(len(jokes), scroll_offset)
        rng = self.visible_range(len(jokes), offset)
        rows = []
        for index in rng:
            row = render_row(index, jokes, from_cache, top=index * self.row_height)
            if row is not None:
                rows.append(row)
        return ListWindow(
            start=rng.start,
            stop=rng.stop,
            scroll_offset=offset,
            total_height=self.total_height(len(jokes)),
            height=self.height,
            rows=rows,
        )


def render_row(
    index: int,
    jokes: Sequence[Union[JokeRecord, ShrunkRecord]],
    from_cache: bool,
    top: int = 0,
) -> Optional[RowView]:
    # The list can shrink under a pending render; such rows render as nothing.
    if index < 0 or index >= len(jokes):
        return None
    joke = jokes[index]
    if from_cache:
        return RowView(
            index=index,
            top=top,
            lines=(joke.summary,),
            category=joke.category,
            id=joke.id,
            type=joke.type,
        )
    if joke.type == TWOPART:
        lines = (joke.setup or "", joke.delivery or "")
    else:
        lines = (joke.joke or "",)
    return RowView(
        index=index,
        top=top,
        lines=lines,
        category=joke.category,
        id=joke.id,
        flags=", ".join(joke.active_flags) or None,
    )


def display_mode(state: UiState) -> str:
    """Pick exactly one of loading / error / empty / list, in that priority."""
    if isinstance(state, Loading):
        return LOADING
    if isinstance(state, Error):
        return ERROR
    if isinstance(state, Loaded) and state.records:
        return LIST
    return EMPTY


def source_label(from_cache: bool) -> str:
    return CACHE_LABEL if from_cache else API_LABEL


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "unknown"
    return value.strftime("%Y-%m-%d %H:%M:%S")


def render_text(state: UiState, window: Optional[ListWindow] = None) -> str:
    """Plain-text rendering of the whole view, used by the CLI."""
    out: List[str] = []
    if isinstance(state, Loaded):
        out.append(source_label(state.from_cache))
        out.append(f"Last updated: {format_timestamp(state.last_updated)}")

    mode = display_mode(state)
    if mode == LOADING:
        out.append(LOADING_MESSAGE)
    elif mode == ERROR:
        out.append(f"Error: {state.message}")
    elif mode == EMPTY:
        out.append(EMPTY_MESSAGE)
    else:
        total = len(state.records)
        if window is None:
            window = VirtualList().window(state.records, state.from_cache)
        out.append(f"Showing {total} jokes (rows {window.start + 1}-{window.stop})")
        for row in window.rows:
            out.append("")
            out.append(f"{row.index + 1}. {row.lines[0]}")
            out.extend(f"   {line}" for line in row.lines[1:])
            out.append("   " + " | ".join(row.meta))
    return "\n".join(out)
