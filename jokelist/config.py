"""Runtime settings, read from the environment (and a local .env file)."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Categories offered by JokeAPI, in selector order. The first is the default.
CATEGORIES = (
    "Programming",
    "Miscellaneous",
    "Dark",
    "Pun",
    "Spooky",
    "Christmas",
)

DEFAULT_API_URL = "https://v2.jokeapi.dev"
DEFAULT_AMOUNT = 50
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024  # what browsers give localStorage
DEFAULT_TIMEOUT = 5.0
DEFAULT_LIST_HEIGHT = 500
DEFAULT_ROW_HEIGHT = 150
DEFAULT_CACHE_PATH = Path.home() / ".jokelist" / "storage.json"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _timeout_env(name: str, default: float) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    # 0 means "no timeout", i.e. requests' own default of waiting forever
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    amount: int = DEFAULT_AMOUNT
    cache_path: Path = DEFAULT_CACHE_PATH
    quota_bytes: int = DEFAULT_QUOTA_BYTES
    request_timeout: Optional[float] = DEFAULT_TIMEOUT
    list_height: int = DEFAULT_LIST_HEIGHT
    row_height: int = DEFAULT_ROW_HEIGHT
    default_category: str = CATEGORIES[0]

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from JOKELIST_* environment variables.

        A .env file in the working directory is loaded first; real environment
        variables win over it.
        """
        load_dotenv()
        default_category = os.getenv("JOKELIST_DEFAULT_CATEGORY", CATEGORIES[0])
        if default_category not in CATEGORIES:
            raise ValueError(
                f"JOKELIST_DEFAULT_CATEGORY must be one of {', '.join(CATEGORIES)}"
            )
        cache_path = os.getenv("JOKELIST_CACHE_PATH")
        return cls(
            api_url=os.getenv("JOKELIST_API_URL", DEFAULT_API_URL).rstrip("/"),
            amount=_int_env("JOKELIST_AMOUNT", DEFAULT_AMOUNT),
            cache_path=Path(cache_path).expanduser() if cache_path else DEFAULT_CACHE_PATH,
            quota_bytes=_int_env("JOKELIST_QUOTA_BYTES", DEFAULT_QUOTA_BYTES),
            request_timeout=_timeout_env("JOKELIST_REQUEST_TIMEOUT", DEFAULT_TIMEOUT),
            list_height=_int_env("JOKELIST_LIST_HEIGHT", DEFAULT_LIST_HEIGHT),
            row_height=_int_env("JOKELIST_ROW_HEIGHT", DEFAULT_ROW_HEIGHT),
            default_category=default_category,
        )
