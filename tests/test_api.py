import pytest
import requests
from unittest.mock import patch, MagicMock

from jokelist import api
from jokelist.errors import ApiError, EmptyResultError, RemoteError


def _resp(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body if body is not None else {}
    return resp


@patch("jokelist.api.requests.get")
def test_fetch_jokes_array(mock_get):
    mock_get.return_value = _resp(body={
        "error": False,
        "amount": 2,
        "jokes": [
            {"id": 1, "category": "Programming", "type": "single", "joke": "Dark mode.",
             "flags": {"nsfw": False, "explicit": True}},
            {"id": 2, "category": "Programming", "type": "twopart", "setup": "Why?",
             "delivery": "Because.", "flags": {}},
        ],
    })

    jokes = api.fetch_jokes("Programming")

    assert [j.id for j in jokes] == [1, 2]
    assert jokes[0].joke == "Dark mode."
    assert jokes[0].active_flags == ["explicit"]
    assert jokes[1].setup == "Why?" and jokes[1].delivery == "Because."


@patch("jokelist.api.requests.get")
def test_fetch_jokes_request_shape(mock_get):
    mock_get.return_value = _resp(body={"jokes": [{"id": 1, "type": "single", "joke": "x"}]})

    api.fetch_jokes("Pun", timeout=3.0)

    args, kwargs = mock_get.call_args
    assert args[0] == "https://v2.jokeapi.dev/joke/Pun"
    assert kwargs["params"] == {"type": "single,twopart", "amount": 50}
    assert kwargs["timeout"] == 3.0


@patch("jokelist.api.requests.get")
def test_single_joke_body_is_wrapped(mock_get):
    mock_get.return_value = _resp(body={
        "error": False, "id": 7, "category": "Spooky", "type": "twopart",
        "setup": "Knock knock", "delivery": "Boo",
    })

    jokes = api.fetch_jokes("Spooky")
    assert len(jokes) == 1
    assert jokes[0].id == 7


@patch("jokelist.api.requests.get")
def test_non_200_raises_remote_error(mock_get):
    mock_get.return_value = _resp(status=500)

    with pytest.raises(RemoteError) as exc:
        api.fetch_jokes("Dark")
    assert exc.value.status_code == 500
    assert "500" in str(exc.value)


@patch("jokelist.api.requests.get")
def test_api_error_flag(mock_get):
    mock_get.return_value = _resp(body={"error": True, "message": "No matching joke found"})

    with pytest.raises(ApiError, match="No matching joke found"):
        api.fetch_jokes("Christmas")


@patch("jokelist.api.requests.get")
def test_api_error_flag_without_message(mock_get):
    mock_get.return_value = _resp(body={"error": True})

    with pytest.raises(ApiError, match="Unknown API error"):
        api.fetch_jokes("Christmas")


@patch("jokelist.api.requests.get")
def test_empty_jokes_raises(mock_get):
    mock_get.return_value = _resp(body={"jokes": []})

    with pytest.raises(EmptyResultError, match="No jokes found"):
        api.fetch_jokes("Programming")


@patch("jokelist.api.requests.get")
def test_transport_failure(mock_get):
    mock_get.side_effect = requests.ConnectionError("boom")

    with pytest.raises(RemoteError) as exc:
        api.fetch_jokes("Programming")
    assert exc.value.status_code is None


@patch("jokelist.api.requests.get")
def test_invalid_json(mock_get):
    resp = _resp()
    resp.json.side_effect = ValueError("not json")
    mock_get.return_value = resp

    with pytest.raises(RemoteError, match="Invalid JSON"):
        api.fetch_jokes("Programming")


def test_unknown_category():
    with pytest.raises(ValueError):
        api.joke_url("Knock-knock")


def test_normalize_unrecognized_body():
    assert api.normalize_jokes({"amount": 0}) == []
    assert api.normalize_jokes(["not", "a", "dict"]) == []


@patch("jokelist.api.requests.get")
def test_requests_json_decode_error_reported_as_invalid_json(mock_get):
    resp = _resp()
    resp.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
    mock_get.return_value = resp

    with pytest.raises(RemoteError, match="Invalid JSON"):
        api.fetch_jokes("Programming")
