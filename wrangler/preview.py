"""Preview helpers: request methods, live-reload messages, origin checks and preview URLs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum

from .config import Target, missing_publish_fields

log = logging.getLogger(__name__)

# Returns just the worker response rather than the full preview page.
PREVIEW_ADDRESS = "https://00000000000000000000000000000000.cloudflareworkers.com"
PREVIEW_HOST = "example.com"

SITES_UNAUTH_PREVIEW_ERR = (
    "Unauthenticated preview does not work for previewing Workers Sites; you need to "
    "authenticate to upload your site contents."
)

_RELEASE_SAFE_ORIGINS = ("https://cloudflareworkers.com",)
_DEBUG_SAFE_ORIGINS = ("https://cloudflareworkers.com", "http://localhost")
SAFE_ADDRS = ("127.0.0.1", "localhost", "::1")

UNKNOWN = "unknown"


class HTTPMethod(Enum):
    """Request method used to fetch the previewed worker."""

    GET = "get"
    POST = "post"


def parse_http_method(value: str | None) -> HTTPMethod:
    """Parse "get" or "post"; anything else falls back to GET."""
    if value == "post":
        return HTTPMethod.POST
    return HTTPMethod.GET


@dataclass(frozen=True)
class FiddleMessage:
    """A live-reload notification sent to the preview page over its websocket."""

    session_id: str
    new_id: str

    def to_json(self) -> str:
        """The message as compact JSON."""
        payload = {"sessionId": self.session_id, "type": "LiveReload", "newId": self.new_id}
        return json.dumps(payload, separators=(",", ":"))


def _normalize_origin(origin: str | None) -> str:
    text = origin if origin is not None else UNKNOWN
    end = len(text)
    while end > 0 and (text[end - 1] in "/:" or text[end - 1].isnumeric()):
        end -= 1
    return text[:end]


def is_safe_origin(origin: str | None, debug: bool = False) -> bool:
    """Whether a websocket connection comes from a trusted site.

    Trailing slashes, colons and port digits are ignored.
    """
    safe = _DEBUG_SAFE_ORIGINS if debug else _RELEASE_SAFE_ORIGINS
    return _normalize_origin(origin) in safe


def is_safe_address(address: str | None) -> bool:
    """Whether a websocket connection originates from this machine."""
    return (address if address is not None else UNKNOWN) in SAFE_ADDRS


def check_connection(
    origin: str | None, address: str | None, debug: bool = False
) -> list[str]:
    """Reasons to deny an incoming websocket connection; empty when it is accepted."""
    shown_origin = _normalize_origin(origin)
    shown_address = address if address is not None else UNKNOWN
    reasons = []
    if not is_safe_origin(origin, debug):
        reasons.append(
            f"Denied connection from site {shown_origin}. This is not a trusted origin"
        )
    if not is_safe_address(address):
        reasons.append(
            f"Denied connection originating from {shown_address} "
            "which is outside this machine"
        )
    if not reasons:
        log.info(
            "Accepted connection from site %s incoming from %s", shown_origin, shown_address
        )
    return reasons


def missing_preview_fields(target: Target) -> list[str]:
    """Fields an authenticated preview needs that the target leaves empty."""
    return missing_publish_fields(target)


def preview_cookie(script_id: str, session_id: str, https: bool, host: str) -> str:
    """The cookie selecting an uploaded script on the preview service."""
    return f"__ew_fiddle_preview={script_id}{session_id}{int(https)}{host}"


def browser_url(
    script_id: str,
    https: bool,
    host: str,
    session_id: str | None = None,
    ws_port: int | None = None,
) -> str:
    """The preview page URL; with a session and port it enables live reload."""
    scheme = "https://" if https else "http://"
    if session_id is not None and ws_port is not None:
        return (
            f"https://cloudflareworkers.com/?wrangler_session_id={session_id}"
            f"&wrangler_ws_port={ws_port}&hide_editor#{script_id}:{scheme}{host}"
        )
    return f"https://cloudflareworkers.com/?hide_editor#{script_id}:{scheme}{host}"