"""Local development proxy configuration and header translation for the preview service."""

from __future__ import annotations

import re
import socket
from dataclasses import dataclass
from typing import Iterable, Mapping
from urllib.parse import urlsplit

from .config import WranglerError

HEADER_PREFIX = "cf-ew-raw-"
STATUS_HEADER = "cf-ew-status"
PREVIEW_HOST = "rawhttp.cloudflareworkers.com"

DEFAULT_PORT = "8787"
DEFAULT_IP = "localhost"
DEFAULT_HOST = "https://example.com"

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")

Headers = Mapping[str, str] | Iterable[tuple[str, str]]


@dataclass(frozen=True)
class Host:
    """The host requests are forwarded as, with its scheme."""

    scheme: str
    hostname: str

    def is_https(self) -> bool:
        """Whether the host is reached over https."""
        return self.scheme == "https"

    def __str__(self) -> str:
        return self.hostname


@dataclass(frozen=True)
class ListeningAddress:
    """The local socket address the development server binds to."""

    ip: str
    port: int
    family: int = socket.AF_INET

    @property
    def address(self) -> tuple[str, int]:
        return (self.ip, self.port)

    def __str__(self) -> str:
        if self.family == socket.AF_INET6:
            text = f"[{self.ip}]:{self.port}"
        else:
            text = f"{self.ip}:{self.port}"
        return text.replace("[::1]", "localhost")


@dataclass(frozen=True)
class ServerConfig:
    """Host to preview as and address to listen on."""

    host: Host
    listening_address: ListeningAddress


def parse_host(host: str) -> Host:
    """Parse a host given as example.com, http://example.com or https://example.com."""
    url = host if _SCHEME.match(host) else f"https://{host}"
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in ("http", "https"):
        raise WranglerError("Your host scheme must be either http or https")
    try:
        hostname = parts.hostname
    except ValueError:
        hostname = None
    if not hostname:
        raise WranglerError(
            "Invalid host, accepted formats are example.com, http://example.com, "
            "or https://example.com"
        )
    if ":" in hostname:
        hostname = f"[{hostname}]"
    return Host(scheme=scheme, hostname=hostname)


def resolve_address(ip: str, port: str | int) -> ListeningAddress:
    """Resolve ip and port to the first socket address they name."""
    text = f"{ip}:{port}"
    try:
        port_number = int(str(port))
    except ValueError:
        raise WranglerError(f"invalid port value in {text}") from None
    if not 0 <= port_number <= 65535:
        raise WranglerError(f"invalid port value in {text}")
    try:
        infos = socket.getaddrinfo(ip, port_number, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise WranglerError(f"Could not parse address {text}: {exc}") from exc
    if not infos:
        raise WranglerError(f"Could not parse address {text}")
    family, _, _, _, sockaddr = infos[0]
    return ListeningAddress(ip=sockaddr[0], port=sockaddr[1], family=family)


def make_server_config(
    host: str | None = None, ip: str | None = None, port: str | None = None
) -> ServerConfig:
    """Server configuration, defaulting to https://example.com on localhost:8787."""
    listening_address = resolve_address(ip or DEFAULT_IP, port or DEFAULT_PORT)
    return ServerConfig(host=parse_host(host or DEFAULT_HOST), listening_address=listening_address)


def _header_items(headers: Headers) -> Iterable[tuple[str, str]]:
    if isinstance(headers, Mapping):
        return headers.items()
    return headers


def structure_request_headers(headers: Headers) -> dict[str, str]:
    """Prefix every request header so the preview service forwards it untouched."""
    return {f"{HEADER_PREFIX}{name.lower()}": value for name, value in _header_items(headers)}


def destructure_response(headers: Headers) -> tuple[int, dict[str, str]]:
    """The real status and headers of a response from the preview service."""
    items = [(name.lower(), value) for name, value in _header_items(headers)]
    status_text = dict(items).get(STATUS_HEADER)
    if status_text is None:
        raise WranglerError("Could not determine status code of response")
    code = status_text.split(" ")[0]
    if not (len(code) == 3 and code.isascii() and code.isdigit() and code[0] != "0"):
        raise WranglerError(f"invalid status code {code!r}")
    stripped = {
        name[len(HEADER_PREFIX):]: value
        for name, value in items
        if name.startswith(HEADER_PREFIX)
    }
    if any(not name for name in stripped):
        raise WranglerError("invalid HTTP header name")
    return int(code), stripped


def preview_url(path: str) -> str:
    """The preview service URL for a request path and query."""
    return f"https://{PREVIEW_HOST}{path}"


def preview_id(script_id: str, session_id: str, host: Host) -> str:
    """The preview id sent to the preview service with every request."""
    return f"{script_id}{session_id}{int(host.is_https())}{host}"