"""Help text for secret and route API errors, and secret target checks."""

from __future__ import annotations

from .config import WARN, Target, WranglerError, debug_list

_SECRET_ERRORS: dict[int, str] = {
    **dict.fromkeys(
        (7003, 7000),
        'Your wrangler.toml is likely missing the field "account_id", '
        "which is required to write to Workers KV.",
    ),
    10053: "There is already another binding with a different type by this name. "
    "Check your wrangler.toml or your Cloudflare dashboard for conflicting bindings",
    10054: "Your secret is too large, bindings must be 1kB or less",
    10055: "You have exceeded the limit of 32 text bindings for this worker. "
    "Run `wrangler secret list` or go to your Cloudflare dashboard to clean up "
    "unused text/secret variables",
}

_ROUTE_SUGGESTIONS: dict[int, str] = {
    10005: "Confirm the route id by running `wrangler route list`",
}


def secret_errors(error_code: int) -> str:
    """A suggestion for a secrets API error code, or an empty string."""
    return _SECRET_ERRORS.get(error_code, "")


def route_error_suggestions(error_code: int) -> str:
    """A suggestion for a routes API error code, or an empty string."""
    return _ROUTE_SUGGESTIONS.get(error_code, "")


def validate_secret_target(target: Target) -> None:
    """Raise WranglerError if the target lacks what secret operations need."""
    missing = [] if target.account_id else ["account_id"]
    if missing:
        raise WranglerError(
            f"{WARN} Your wrangler.toml is missing the following field(s): "
            f"{debug_list(missing)}"
        )