"""Workers KV helpers: error help, target checks, bindings and key encoding."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import quote

from . import http
from .config import Target, WranglerError, debug_list
from .http import ApiError

_BINDING_HELP = "Run `wrangler kv:namespace list` to see your existing namespaces with IDs"

_KV_HELP: dict[int, str] = {
    **dict.fromkeys(
        (7003, 7000),
        'Your wrangler.toml is likely missing the field "account_id", '
        "which is required to write to Workers KV.",
    ),
    **dict.fromkeys((10010, 10011, 10012, 10013, 10014, 10018), _BINDING_HELP),
    10009: "Run `wrangler kv:key list` to see your existing keys",
    **dict.fromkeys((10022, 10024, 10030), "See documentation"),
    **dict.fromkeys((10021, 10035, 10038), "Consider moving this namespace"),
    **dict.fromkeys(
        (10017, 10026),
        "Workers KV is a paid feature, please upgrade your account "
        "(https://www.cloudflare.com/products/workers-kv/)",
    ),
}

# Printable ASCII left unescaped in a URL path segment; letters, digits and
# "_.-~" are always kept by quote().
_PATH_SEGMENT_SAFE = "!$&'()*+,;=:@[]\\^|"

_BINDING_FIRST = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_BINDING_REST = _BINDING_FIRST | set("0123456789")


def kv_help(error_code: int) -> str:
    """A suggestion for a Workers KV API error code, or an empty string."""
    return _KV_HELP.get(error_code, "")


def format_error(status: int, errors: Iterable[ApiError]) -> str:
    """Format KV API errors with KV-specific help text."""
    return http.format_error(status, errors, kv_help)


def validate_target(target: Target) -> None:
    """Raise WranglerError if the target lacks what KV operations need."""
    missing = [] if target.account_id else ["account_id"]
    if missing:
        raise WranglerError(
            f"Your wrangler.toml is missing the following field(s): {debug_list(missing)}"
        )


def has_duplicate_namespaces(target: Target) -> bool:
    """Whether two namespaces of the target share a binding name."""
    seen: set[str] = set()
    for namespace in target.namespaces:
        if namespace.binding in seen:
            return True
        seen.add(namespace.binding)
    return False


def get_namespace_id(target: Target, binding: str) -> str:
    """The id of the namespace bound under ``binding``."""
    if has_duplicate_namespaces(target):
        raise WranglerError(
            f'Namespace binding "{binding}" is duplicated in "{target.name}"'
        )
    for namespace in target.namespaces:
        if namespace.binding == binding:
            return namespace.id
    raise WranglerError(f'Namespace binding "{binding}" not found in "{target.name}"')


def url_encode_key(key: str) -> str:
    """Percent-encode a key for use as a single URL path segment."""
    return quote(key, safe=_PATH_SEGMENT_SAFE)


def validate_binding(binding: str) -> None:
    """Raise WranglerError unless the binding is a valid identifier."""
    valid = (
        bool(binding)
        and binding[0] in _BINDING_FIRST
        and all(char in _BINDING_REST for char in binding[1:])
    )
    if not valid:
        raise WranglerError(
            "A binding can only have alphanumeric and _ characters, "
            "and cannot begin with a number"
        )


def namespace_snippet(binding: str, namespace_id: str, has_namespaces: bool) -> str:
    """The wrangler.toml text that binds a newly created namespace."""
    entry = f'{{ binding = "{binding}", id = "{namespace_id}" }}'
    if has_namespaces:
        return entry
    return f"kv-namespaces = [ \n\t {entry} \n]"


def site_namespace_title(target: Target, preview: bool) -> str:
    """Title of the namespace holding a Workers Site's assets."""
    suffix = "workers_sites_assets_preview" if preview else "workers_sites_assets"
    return f"__{target.name}-{suffix}"