"""Joke list controller: cache-vs-network decision and UI state transitions."""
from __future__ import annotations

import logging
import threading
import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

from . import api
from .config import CATEGORIES
from .errors import JokeListError
from .models import JokeRecord, ShrunkRecord
from .state import Empty, Error, Idle, Loaded, Loading, UiState
from .store import CacheStore, storage_key, timestamp_key

log = logging.getLogger(__name__)

Fetcher = Callable[[str], Sequence[JokeRecord]]
Clock = Callable[[], float]


def _parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Epoch-milliseconds string -> local datetime; None when missing or garbled."""
    if raw is None:
        return None
    try:
        return datetime.fromtimestamp(int(raw) / 1000)
    except (TypeError, ValueError, OverflowError, OSError):
        log.warning("Ignoring unreadable cache timestamp %r", raw)
        return None


class JokeListController:
    """Owns the selected category and the single UI state for the joke list.

    Safe to share between threads: state changes happen under a lock and a
    generation counter drops results from requests that were superseded while
    their fetch was in flight.
    """

    def __init__(
        self,
        store: CacheStore,
        fetch: Fetcher = api.fetch_jokes,
        category: str = CATEGORIES[0],
        clock: Clock = time.time,
    ) -> None:
        self._check_category(category)
        self._store = store
        self._fetch = fetch
        self._clock = clock
        self._lock = threading.Lock()
        self._category = category
        self._state: UiState = Idle()
        self._generation = 0
        self._mounted = False

    # --- read-only view ------------------------------------------------------

    @property
    def category(self) -> str:
        return self._category

    @property
    def state(self) -> UiState:
        return self._state

    @property
    def jokes(self) -> Tuple[Union[JokeRecord, ShrunkRecord], ...]:
        state = self._state
        return state.records if isinstance(state, Loaded) else ()

    @property
    def loading(self) -> bool:
        return isinstance(self._state, Loading)

    @property
    def error(self) -> Optional[str]:
        state = self._state
        return state.message if isinstance(state, Error) else None

    @property
    def from_cache(self) -> bool:
        state = self._state
        return isinstance(state, Loaded) and state.from_cache

    @property
    def last_updated(self) -> Optional[datetime]:
        state = self._state
        return state.last_updated if isinstance(state, Loaded) else None

    @property
    def mounted(self) -> bool:
        return self._mounted

    # --- triggers ------------------------------------------------------------

    def mount(self) -> UiState:
        """Initial load for the default category."""
        self._mounted = True
        return self.resolve(self._category)

    def select_category(self, category: str, resolve: bool = True) -> UiState:
        """Switch category; resolves only when the selection actually changes.

        With ``resolve=False`` only the selection moves; the caller is about to
        run its own forced resolve and a second fetch would be wasted.
        """
        self._check_category(category)
        if category == self._category and self._mounted:
            return self._state
        self._category = category
        self._mounted = True
        if not resolve:
            return self._state
        return self.resolve(category)

    def refresh(self) -> UiState:
        return self.resolve(self._category, force_refresh=True)

    def clear_cache(self) -> UiState:
        """Drop the cache entry (records and timestamp) for the current category, then refetch."""
        key = storage_key(self._category)
        self._store.clear(key)
        self._store.clear(timestamp_key(key))
        log.info("Cleared cached jokes for %s", self._category)
        return self.resolve(self._category, force_refresh=True)

    # --- core ----------------------------------------------------------------

    def resolve(self, category: str, force_refresh: bool = False) -> UiState:
        """Show jokes for ``category``, from the cache when possible.

        Cache hit (and not forced): shrunk records, no network call.
        Otherwise: one API fetch; on success show full records and overwrite
        the cache entry, on failure show the error with an empty list.
        """
        self._check_category(category)
        key = storage_key(category)
        token = self._next_generation()

        if not force_refresh:
            cached = self._store.load(key)
            if cached:
                log.info("Data loaded from local cache for %s (limited attributes)", category)
                updated = _parse_timestamp(self._store.get_item(timestamp_key(key)))
                self._commit(token, Loaded.cached(cached, updated, category))
                return self._state

        self._commit(token, Loading(category))
        try:
            records = list(self._fetch(category))
            now = self._clock()
            if records:
                self._commit(token, Loaded.fresh(records, datetime.fromtimestamp(now), category))
            else:
                self._commit(token, Empty())
            self._write_cache(key, records, now)
        except JokeListError as exc:
            log.error("Error fetching jokes for %s: %s", category, exc)
            self._commit(token, Error(exc.message))
        finally:
            with self._lock:
                if token == self._generation and isinstance(self._state, Loading):
                    self._state = Idle()
        return self._state

    # --- helpers -------------------------------------------------------------

    def _write_cache(self, key: str, records: List[JokeRecord], now: float) -> None:
        if not records:
            return
        # Results are ignored on purpose; the store has already logged any failure.
        self._store.save(key, [r.shrink() for r in records])
        try:
            self._store.set_item(timestamp_key(key), str(int(now * 1000)))
        except JokeListError as exc:
            log.error("Error saving cache timestamp: %s", exc)
        log.debug("Saved %d shrunk jokes under %s", len(records), key)

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _commit(self, token: int, state: UiState) -> bool:
        with self._lock:
            if token != self._generation:
                log.debug("Discarding superseded result %s (current generation %d)", token, self._generation)
                return False
            self._state = state
            return True

    @staticmethod
    def _check_category(category: str) -> None:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category {category!r}; expected one of {', '.join(CATEGORIES)}")
