"""Simple API client for JokeAPI (https://v2.jokeapi.dev).

Functions are small and raise a JokeListError subclass on failure.
Network calls go through ``requests.get`` so they are mockable in tests.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import CATEGORIES, DEFAULT_AMOUNT, DEFAULT_API_URL, DEFAULT_TIMEOUT
from .errors import ApiError, EmptyResultError, RemoteError
from .models import JokeRecord

log = logging.getLogger(__name__)

JOKE_TYPES = "single,twopart"


def _get_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> Any:
    """Internal helper to perform a GET request and return parsed JSON.

    Args:
        url: Absolute URL.
        params: Optional query parameters.
        timeout: Request timeout in seconds, or None to wait indefinitely.

    Returns:
        Parsed JSON (list or dict).

    Raises:
        RemoteError: On non-2xx status codes, transport failures or bad JSON.
    """
    try:
        resp = requests.get(url, params=params or {}, timeout=timeout)
        if not (200 <= resp.status_code < 300):
            raise RemoteError(
                f"API responded with status: {resp.status_code}",
                status_code=resp.status_code,
            )
        return resp.json()
    # requests' JSONDecodeError is also a RequestException; match it as bad JSON first.
    except ValueError as e:
        raise RemoteError(f"Invalid JSON from {url}: {e}") from e
    except requests.RequestException as e:
        raise RemoteError(f"Request failed for {url}: {e}") from e


def joke_url(category: str, api_url: str = DEFAULT_API_URL) -> str:
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category {category!r}; expected one of {', '.join(CATEGORIES)}")
    return f"{api_url.rstrip('/')}/joke/{category}"


def normalize_jokes(data: Any) -> List[Dict[str, Any]]:
    """Turn any JokeAPI body into a flat list of raw joke objects.

    A ``jokes`` array is used as-is; a body that is itself a joke (has
    ``joke`` or ``setup``) becomes a one-element list; anything else is empty.

    Raises:
        ApiError: If the body carries ``error: true``.
    """
    if not isinstance(data, dict):
        return []
    if data.get("error"):
        raise ApiError(str(data.get("message") or "Unknown API error"))
    jokes = data.get("jokes")
    if isinstance(jokes, list):
        return [j for j in jokes if isinstance(j, dict)]
    if data.get("joke") or data.get("setup"):
        return [data]
    return []


def fetch_jokes(
    category: str,
    amount: int = DEFAULT_AMOUNT,
    api_url: str = DEFAULT_API_URL,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> List[JokeRecord]:
    """Fetch up to ``amount`` single or two-part jokes from one category.

    Returns:
        Full joke records, in API order. Never empty.

    Raises:
        RemoteError: Non-2xx status or unreachable API.
        ApiError: The API reported an error in a 2xx body.
        EmptyResultError: The response held no jokes.
    """
    url = joke_url(category, api_url)
    log.info("Fetching jokes from API: %s", url)
    data = _get_json(url, params={"type": JOKE_TYPES, "amount": int(amount)}, timeout=timeout)
    raw = normalize_jokes(data)
    if not raw:
        raise EmptyResultError()
    return [JokeRecord.from_api(item) for item in raw]
