"""Minimal HTTP JSON helpers for puzzle and illustration sources."""

from __future__ import annotations

import json
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


class HttpRequestError(RuntimeError):
    """Raised when a JSON request fails at the transport or HTTP level."""

    def __init__(self, url: str, message: str, status: int | None = None):
        self.url = url
        self.status = status
        super().__init__(message)


def post_json(url: str, payload: dict[str, Any], headers: dict[str, str], timeout_sec: float = 60.0) -> dict[str, Any]:
    """POST a JSON payload and decode the JSON response."""
    body = json.dumps(payload).encode("utf-8")
    request = Request(url=url, data=body, method="POST")
    request.add_header("Content-Type", "application/json")
    for key, value in headers.items():
        request.add_header(key, value)

    try:
        with urlopen(request, timeout=timeout_sec) as response:
            raw = response.read().decode("utf-8")
    except HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace")
        raise HttpRequestError(url, f"HTTP {exc.code} from {url}: {detail}", status=exc.code) from exc
    except URLError as exc:
        raise HttpRequestError(url, f"Network error calling {url}: {exc.reason}") from exc

    try:
        return json.loads(raw) if raw else {}
    except json.JSONDecodeError as exc:
        raise HttpRequestError(url, f"Invalid JSON from {url}: {exc}") from exc
