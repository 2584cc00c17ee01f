# app/__init__.py
import os
from functools import partial
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from jokelist import api
from jokelist.config import CATEGORIES, Settings
from jokelist.controller import JokeListController
from jokelist.store import CacheStore

# Load .env as early as possible so env vars are available everywhere
load_dotenv()


def build_controller(settings: Settings, fetch: Optional[Any] = None) -> JokeListController:
    """Wire store + API client into one controller shared by all requests."""
    store = CacheStore(settings.cache_path, quota_bytes=settings.quota_bytes)
    if fetch is None:
        fetch = partial(
            api.fetch_jokes,
            amount=settings.amount,
            api_url=settings.api_url,
            timeout=settings.request_timeout,
        )
    return JokeListController(store, fetch=fetch, category=settings.default_category)


def create_app(settings: Optional[Settings] = None, fetch: Optional[Any] = None) -> Flask:
    """Application factory."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev")
    app.config["APP_NAME"] = os.getenv("APP_NAME", "Jokes Application")

    settings = settings or Settings.from_env()
    app.config["JOKELIST_SETTINGS"] = settings
    app.extensions["jokelist"] = build_controller(settings, fetch)
    print(f"[INFO] Joke cache at {settings.cache_path}; API {settings.api_url}")
    if settings.request_timeout is None:
        print("[WARN] JOKELIST_REQUEST_TIMEOUT disabled; API calls may hang indefinitely.")

    from .routes import bp as main_bp
    app.register_blueprint(main_bp)

    # Make APP_NAME and categories available in templates
    @app.context_processor
    def inject_globals():
        return {"APP_NAME": app.config["APP_NAME"], "CATEGORIES": CATEGORIES}

    return app
