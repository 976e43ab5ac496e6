import json

from wrangler.config import WranglerError
from wrangler.routes import (
    Route,
    RouteUploadResult,
    build_subdomain_request,
    deploy_route,
    publish_routes,
    routes_error_help,
    subdomain_api_address,
    zoneless_address,
)


def _create_ok(route):
    return Route(pattern=route.pattern, script=route.script, id="new-id")


def _create_fails(route):
    raise WranglerError("boom")


def _create_unexpected(route):
    raise AssertionError("create must not be called")


def test_same_route_is_not_created():
    existing = [Route("example.com/*", "worker", "abc")]
    result = deploy_route(Route("example.com/*", "worker"), existing, _create_unexpected)
    assert result.kind is RouteUploadResult.Kind.SAME
    assert result.route.id == "abc"
    assert str(result) == "example.com/* => stayed the same"


def test_conflicting_route_reports_existing_script():
    existing = [Route("example.com/*", "other", "abc")]
    result = deploy_route(Route("example.com/*", "worker"), existing, _create_unexpected)
    assert result.kind is RouteUploadResult.Kind.CONFLICT
    assert str(result) == "example.com/* => is already pointing to other"


def test_conflict_with_null_worker():
    existing = [Route("example.com/*", None, "abc")]
    result = deploy_route(Route("example.com/*", "worker"), existing, _create_unexpected)
    assert str(result) == "example.com/* => is already pointing to null worker"


def test_new_route_is_created():
    result = deploy_route(Route("example.com/*", "worker"), [], _create_ok)
    assert result.kind is RouteUploadResult.Kind.NEW
    assert result.route.id == "new-id"
    assert str(result) == "example.com/* => created"


def test_failed_creation_keeps_message():
    result = deploy_route(Route("example.com/*", "worker", "x"), [], _create_fails)
    assert result.kind is RouteUploadResult.Kind.ERROR
    assert result.route.id is None
    assert str(result) == "example.com/* => creation failed: boom"


def test_publish_routes_keeps_order():
    existing = [Route("a.com/*", "worker", "1")]
    routes = [Route("b.com/*", "worker"), Route("a.com/*", "worker")]
    results = publish_routes(routes, existing, _create_ok)
    assert [r.kind for r in results] == [
        RouteUploadResult.Kind.NEW,
        RouteUploadResult.Kind.SAME,
    ]
    assert [r.route.pattern for r in results] == ["b.com/*", "a.com/*"]


def test_routes_error_help():
    assert "A worker with a different name" in routes_error_help(10020)
    assert routes_error_help(1) == ""


def test_subdomain_request_round_trips():
    assert json.loads(build_subdomain_request()) == {"enabled": True}
    assert " " not in build_subdomain_request()


def test_addresses():
    assert zoneless_address("worker", "sub") == "https://worker.sub.workers.dev"
    address = subdomain_api_address("acct", "worker")
    assert address.startswith("https://api.cloudflare.com/client/v4/accounts/acct/")
    assert address.endswith("/workers/scripts/worker/subdomain")