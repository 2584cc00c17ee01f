"""CLI entry point for the joke list.

Usage:
    python -m jokelist.main categories
    python -m jokelist.main show [--category C] [--refresh] [--scroll PX]
    python -m jokelist.main clear [--category C]
    python -m jokelist.main keys
"""
from __future__ import annotations

import argparse
import logging
from functools import partial
from typing import List, Optional

from . import api
from .config import CATEGORIES, Settings
from .controller import JokeListController
from .render import VirtualList, render_text
from .state import Error
from .store import CacheStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jokelist",
        description="Browse JokeAPI jokes by category, with a local cache.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("categories", help="List the available joke categories")

    p_show = sub.add_parser("show", help="Show jokes for a category (cache first)")
    p_show.add_argument("-c", "--category", choices=CATEGORIES, default=None,
                        help="Joke category (default: configured default)")
    p_show.add_argument("--refresh", action="store_true", help="Skip the cache and fetch from the API")
    p_show.add_argument("--scroll", type=int, default=0, help="Scroll offset in pixels (default: 0)")

    p_clear = sub.add_parser("clear", help="Clear the cache for a category, then refetch")
    p_clear.add_argument("-c", "--category", choices=CATEGORIES, default=None)

    sub.add_parser("keys", help="List keys held in the local cache")

    return parser


def _make_controller(settings: Settings, category: Optional[str]) -> JokeListController:
    store = CacheStore(settings.cache_path, quota_bytes=settings.quota_bytes)
    fetch = partial(
        api.fetch_jokes,
        amount=settings.amount,
        api_url=settings.api_url,
        timeout=settings.request_timeout,
    )
    return JokeListController(store, fetch=fetch, category=category or settings.default_category)


def _print_state(ctl: JokeListController, settings: Settings, scroll: int = 0) -> int:
    state = ctl.state
    print(f"Category: {ctl.category}")
    window = None
    if ctl.jokes:
        vlist = VirtualList(settings.list_height, settings.row_height)
        window = vlist.window(ctl.jokes, ctl.from_cache, scroll)
    print(render_text(state, window))
    return 1 if isinstance(state, Error) else 0


def _cmd_categories() -> int:
    for c in CATEGORIES:
        print(c)
    return 0


def _cmd_show(settings: Settings, category: Optional[str], refresh: bool, scroll: int) -> int:
    ctl = _make_controller(settings, category)
    if refresh:
        ctl.refresh()
    else:
        ctl.mount()
    return _print_state(ctl, settings, scroll)


def _cmd_clear(settings: Settings, category: Optional[str]) -> int:
    ctl = _make_controller(settings, category)
    ctl.clear_cache()
    return _print_state(ctl, settings)


def _cmd_keys(settings: Settings) -> int:
    keys = CacheStore(settings.cache_path, quota_bytes=settings.quota_bytes).keys()
    if not keys:
        print("Cache is empty.")
        return 0
    for k in keys:
        print(k)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "categories":
        return _cmd_categories()

    try:
        settings = Settings.from_env()
    except ValueError as e:
        parser.error(str(e))

    if args.command == "show":
        return _cmd_show(settings, args.category, args.refresh, args.scroll)
    if args.command == "clear":
        return _cmd_clear(settings, args.category)
    if args.command == "keys":
        return _cmd_keys(settings)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
