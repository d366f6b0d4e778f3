from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from typing import Callable
from unittest.mock import MagicMock

import pytest
from mitmproxy import http


@pytest.fixture
def request_msg() -> http.Request:
    return http.Request.make(
        "POST",
        "http://api.example.com/api/items?page=2",
        content=b"hello",
        headers={"X-Trace": "abc"},
    )


@pytest.fixture
def response_msg() -> http.Response:
    return http.Response.make(
        200,
        b'{"ok": true}',
        {"Content-Type": "application/json", "X-Backend": "svc-1"},
    )


@pytest.fixture
def make_session() -> Callable[..., MagicMock]:
    """A MagicMock standing in for a requests.Session."""

    def make(status_code: int = 200, payload: Any = None) -> MagicMock:
        reply = MagicMock()
        reply.status_code = status_code
        reply.json.return_value = {"headers": {}} if payload is None else payload
        session = MagicMock()
        session.post.return_value = reply
        return session

    return make


@pytest.fixture
def policies_file(tmp_path: Path) -> Callable[[list[dict]], str]:
    """Write a policy config document and return its path."""

    def write(policies: list[dict]) -> str:
        path = tmp_path / "policies.json"
        path.write_text(json.dumps({"policies": policies}))
        return str(path)

    return write
