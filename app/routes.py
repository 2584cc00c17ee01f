from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from jokelist.config import CATEGORIES
from jokelist.controller import JokeListController
from jokelist.render import (
    VirtualList,
    display_mode,
    format_timestamp,
    source_label,
)
from jokelist.state import Error, Loaded

bp = Blueprint("main", __name__)


def get_controller() -> JokeListController:
    return current_app.extensions["jokelist"]


def _scroll_arg() -> int:
    try:
        return max(0, int(request.args.get("scroll", 0)))
    except (TypeError, ValueError):
        return 0


def _category_form_value(ctl: JokeListController) -> str:
    category = (request.form.get("category") or ctl.category).strip()
    return category if category in CATEGORIES else ctl.category


@bp.route("/", methods=["GET"])
def index():
    ctl = get_controller()
    category = request.args.get("category")
    if category is not None and category not in CATEGORIES:
        flash(f"Unknown category {category!r}.")
        return redirect(url_for("main.index"))

    if category:
        ctl.select_category(category)
    elif not ctl.mounted:
        ctl.mount()

    settings = current_app.config["JOKELIST_SETTINGS"]
    vlist = VirtualList(settings.list_height, settings.row_height)
    window = vlist.window(ctl.jokes, ctl.from_cache, _scroll_arg())
    state = ctl.state

    return render_template(
        "jokes.html",
        category=ctl.category,
        mode=display_mode(state),
        error=ctl.error,
        from_cache=ctl.from_cache,
        source=source_label(ctl.from_cache),
        last_updated=format_timestamp(ctl.last_updated) if isinstance(state, Loaded) else None,
        count=len(ctl.jokes),
        window=window,
        loading=ctl.loading,
        scroll_step=settings.row_height,
    )


@bp.post("/refresh")
def refresh():
    ctl = get_controller()
    category = _category_form_value(ctl)
    if category != ctl.category:
        ctl.select_category(category, resolve=False)
    state = ctl.refresh()
    if isinstance(state, Error):
        current_app.logger.warning("refresh failed: %s", state.message)
    return redirect(url_for("main.index", category=ctl.category))


@bp.post("/clear-cache")
def clear_cache():
    ctl = get_controller()
    category = _category_form_value(ctl)
    if category != ctl.category:
        ctl.select_category(category, resolve=False)
    ctl.clear_cache()
    flash(f"Cache cleared for {ctl.category}.")
    return redirect(url_for("main.index", category=ctl.category))


@bp.route("/api/state")
def api_state():
    ctl = get_controller()
    if not ctl.mounted:
        ctl.mount()
    state = ctl.state
    return {
        "category": ctl.category,
        "mode": display_mode(state),
        "loading": ctl.loading,
        "error": ctl.error,
        "fromCache": ctl.from_cache,
        "lastUpdated": ctl.last_updated.isoformat() if ctl.last_updated else None,
        "jokes": [j.to_dict() for j in ctl.jokes],
    }


@bp.route("/health")
def health():
    return {"ok": True}
