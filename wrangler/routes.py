"""Deploying a worker to zone routes or to its workers.dev subdomain."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from .config import WranglerError

log = logging.getLogger(__name__)

API_BASE = "https://api.cloudflare.com/client/v4"

_ROUTES_ERROR_HELP: dict[int, str] = {
    10020: (
        "\n            A worker with a different name was previously deployed to the "
        "specified route.\n            If you would like to overwrite that worker,\n"
        "            you will need to change `name` in your `wrangler.toml` to match "
        "the currently deployed worker,\n            or navigate to "
        "https://dash.cloudflare.com/workers and rename or delete that worker.\\n"
    ),
}


@dataclass(frozen=True)
class Route:
    """A route pattern and the script it points to."""

    pattern: str
    script: str | None = None
    id: str | None = None


class RouteUploadResult:
    """The outcome of deploying one route."""

    class Kind(Enum):
        SAME = "same"
        CONFLICT = "conflict"
        NEW = "new"
        ERROR = "error"

    def __init__(self, kind: "RouteUploadResult.Kind", route: Route, message: str = "") -> None:
        self.kind = kind
        self.route = route
        self.message = message

    def __repr__(self) -> str:
        return f"RouteUploadResult({self.kind.name}, {self.route!r}, {self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RouteUploadResult):
            return NotImplemented
        return (self.kind, self.route, self.message) == (other.kind, other.route, other.message)

    def __str__(self) -> str:
        pattern = self.route.pattern
        if self.kind is self.Kind.SAME:
            return f"{pattern} => stayed the same"
        if self.kind is self.Kind.CONFLICT:
            script = self.route.script if self.route.script is not None else "null worker"
            return f"{pattern} => is already pointing to {script}"
        if self.kind is self.Kind.NEW:
            return f"{pattern} => created"
        return f"{pattern} => creation failed: {self.message}"


CreateRoute = Callable[[Route], Route]


def deploy_route(
    route: Route, existing_routes: Iterable[Route], create: CreateRoute
) -> RouteUploadResult:
    """Deploy one route, creating it only when no existing route has its pattern.

    ``create(route)`` returns the created route with its id and raises
    WranglerError when the API refuses it.
    """
    for existing in existing_routes:
        if existing.pattern == route.pattern:
            kind = (
                RouteUploadResult.Kind.SAME
                if existing.script == route.script
                else RouteUploadResult.Kind.CONFLICT
            )
            return RouteUploadResult(kind, existing)

    log.info("Creating your route %r", route.pattern)
    try:
        created = create(route)
    except WranglerError as exc:
        failed = Route(pattern=route.pattern, script=route.script, id=None)
        return RouteUploadResult(RouteUploadResult.Kind.ERROR, failed, str(exc))
    return RouteUploadResult(RouteUploadResult.Kind.NEW, created)


def publish_routes(
    routes: Iterable[Route], existing_routes: Iterable[Route], create: CreateRoute
) -> list[RouteUploadResult]:
    """Deploy every route against one snapshot of the existing routes."""
    existing = list(existing_routes)
    return [deploy_route(route, existing, create) for route in routes]


def routes_error_help(error_code: int) -> str:
    """A suggestion for a routes API error code, or an empty string."""
    return _ROUTES_ERROR_HELP.get(error_code, "")


def build_subdomain_request() -> str:
    """The body that enables a script on the workers.dev subdomain."""
    return json.dumps({"enabled": True}, separators=(",", ":"))


def zoneless_address(script_name: str, subdomain: str) -> str:
    """The public workers.dev address of a script."""
    return f"https://{script_name}.{subdomain}.workers.dev"


def subdomain_api_address(account_id: str, script_name: str) -> str:
    """The API endpoint that makes a script public on the workers.dev subdomain."""
    return f"{API_BASE}/accounts/{account_id}/workers/scripts/{script_name}/subdomain"