"""HTTP client construction and API error formatting."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Iterable

import requests

from .config import SLEUTH, WARN

VERSION = "dev"
CONNECT_TIMEOUT = 10
READ_TIMEOUT = 30

_STATUS_CONTEXT = {
    413: "Returned status code 413, Payload Too Large. "
    "Please make sure your upload is less than 100MB in size",
    504: "Returned status code 504, Gateway Timeout. Please try again in a few seconds",
}


@dataclass(frozen=True)
class ApiError:
    """A single error entry from an API response."""

    code: int
    message: str


class _TimeoutSession(requests.Session):
    """A session that applies a default timeout to every request."""

    def __init__(self, timeout: tuple[int, int]) -> None:
        super().__init__()
        self.timeout = timeout

    def request(self, method, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)


def user_agent(feature: str | None = None) -> str:
    """The User-Agent string, optionally tagged with a feature name."""
    if feature:
        return f"wrangler/{VERSION}/{feature}"
    return f"wrangler/{VERSION}"


def headers(feature: str | None = None) -> dict[str, str]:
    """Default headers sent with every request."""
    return {"User-Agent": user_agent(feature)}


def client(feature: str | None = None) -> requests.Session:
    """A session with the default headers and timeouts."""
    session = _TimeoutSession((CONNECT_TIMEOUT, READ_TIMEOUT))
    session.headers.update(headers(feature))
    return session


def status_code_context(status: int) -> str | None:
    """Explanation for gateway-level status codes that carry no API error code."""
    return _STATUS_CONTEXT.get(status)


def format_error(
    status: int,
    errors: Iterable[ApiError],
    err_helper: Callable[[int], str] | None = None,
) -> str:
    """Format API errors for display, with optional per-code help text."""
    context = status_code_context(status)
    if context:
        print(f"{WARN} {context}", file=sys.stderr)
    parts = []
    for error in errors:
        parts.append(f"{WARN} Code {error.code}: {error.message}\n")
        if err_helper is not None:
            parts.append(f"{SLEUTH} {err_helper(error.code)}\n")
    return "".join(parts).rstrip()