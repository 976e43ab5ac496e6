"""Project configuration: targets, KV namespace bindings and site settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

WARN = "⚠️"
SLEUTH = "🕵️"


class WranglerError(Exception):
    """Raised when a command cannot be carried out."""


@dataclass
class KvNamespace:
    """A KV namespace bound to a worker, optionally backed by a local bucket."""

    binding: str
    id: str
    bucket: Path | None = None

    def __post_init__(self) -> None:
        if self.bucket is not None:
            self.bucket = Path(self.bucket)


@dataclass
class Site:
    """Workers Site settings: the asset bucket and the files it uploads."""

    bucket: Path
    entry_point: str | None = None
    include: list[str] | None = None
    exclude: list[str] | None = None

    def __post_init__(self) -> None:
        self.bucket = Path(self.bucket)


@dataclass
class Target:
    """A resolved deployment target from wrangler.toml."""

    account_id: str
    name: str
    target_type: str = "webpack"
    kv_namespaces: list[KvNamespace] | None = None
    site: Site | None = None
    webpack_config: str | None = None
    vars: dict[str, str] | None = None

    @property
    def namespaces(self) -> list[KvNamespace]:
        """The bound namespaces, empty when none are configured."""
        return list(self.kv_namespaces or [])

    def add_kv_namespace(self, namespace: KvNamespace) -> None:
        """Bind another KV namespace to this target."""
        if self.kv_namespaces is None:
            self.kv_namespaces = []
        self.kv_namespaces.append(namespace)


def debug_list(items: Iterable[str]) -> str:
    """Render strings as a bracketed, quoted list."""
    return "[" + ", ".join(f'"{item}"' for item in items) + "]"


def missing_publish_fields(target: Target) -> list[str]:
    """Names of the fields publishing needs that the target leaves empty."""
    missing = []
    if not target.account_id:
        missing.append("account_id")
    if not target.name:
        missing.append("name")
    for kv in target.kv_namespaces or []:
        if not kv.binding:
            missing.append("kv-namespace binding")
        if not kv.id:
            missing.append("kv-namespace id")
    return missing


def validate_publish_fields(target: Target) -> None:
    """Raise WranglerError if the target lacks fields required to publish."""
    missing = missing_publish_fields(target)
    if not missing:
        return
    noun, verb = ("fields", "are") if len(missing) >= 2 else ("field", "is")
    raise WranglerError(
        f"{WARN} Your wrangler.toml is missing the {noun} {debug_list(missing)} "
        f"which {verb} required to publish your worker!"
    )


def site_incompatible_routes(patterns: Iterable[str]) -> list[str]:
    """Route patterns lacking the trailing '*' a site needs to serve every path."""
    return [pattern for pattern in patterns if not pattern.endswith("*")]