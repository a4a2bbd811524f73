"""Shared test fixtures for apikit tests."""

import json
from collections.abc import Callable
from urllib.parse import urlencode

import pytest
from starlette.requests import Request
from starlette.responses import Response


def _build_request(
    path: str = "/",
    query: dict | list[tuple[str, str]] | None = None,
    method: str = "GET",
) -> Request:
    """Build a bare Starlette request without running an app.

    ``query`` may be a list of pairs to send a key more than once.
    """
    scope = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "query_string": urlencode(query or {}).encode("latin-1"),
        "headers": [],
    }
    return Request(scope)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory for in-memory requests, e.g. ``make_request("/items", {"page": "2"})``."""
    return _build_request


def body_of(response: Response) -> dict:
    """Decode a JSONResponse body."""
    return json.loads(response.body)


@pytest.fixture
def body() -> Callable[[Response], dict]:
    return body_of
