"""Locating prebuilt tool binaries and checking installed tool versions."""

from __future__ import annotations

import logging
import platform
import subprocess
from pathlib import Path

import requests

from . import http
from .config import WranglerError

log = logging.getLogger(__name__)

CRATES_API = "https://crates.io/api/v1/crates"

_TARGETS = {
    "linux": "x86_64-unknown-linux-musl",
    "darwin": "x86_64-apple-darwin",
    "windows": "x86_64-pc-windows-msvc",
}


def prebuilt_url(
    tool_name: str,
    owner: str,
    version: str,
    system: str | None = None,
    machine: str | None = None,
) -> str | None:
    """Download URL of a prebuilt tool, or None if none exists for the platform."""
    if tool_name == "wranglerjs":
        return (
            f"https://workers.cloudflare.com/get-wranglerjs-binary/"
            f"{tool_name}/v{version}.tar.gz"
        )
    system = (system if system is not None else platform.system()).lower()
    machine = (machine if machine is not None else platform.machine()).lower()
    if machine not in ("x86_64", "amd64"):
        return None
    target = _TARGETS.get(system)
    if target is None:
        return None
    return (
        f"https://workers.cloudflare.com/get-binary/"
        f"{owner}/{tool_name}/v{version}/{target}.tar.gz"
    )


def parse_tool_version(output: str) -> str | None:
    """The last whitespace-separated word of a --version output."""
    words = output.split()
    return words[-1] if words else None


def latest_version(tool_name: str, session: requests.Session | None = None) -> str:
    """The newest published version of a tool according to crates.io."""
    session = session if session is not None else http.client()
    response = session.get(f"{CRATES_API}/{tool_name}")
    try:
        return str(response.json()["crate"]["max_version"])
    except (ValueError, KeyError, TypeError) as exc:
        raise WranglerError(f"could not read the latest version of {tool_name}") from exc


def tool_needs_update(
    tool_name: str, path: str | Path, latest: str | None = None
) -> bool:
    """Whether the installed tool at ``path`` is missing a version or out of date.

    When ``latest`` is not given it is looked up on crates.io.
    """
    try:
        result = subprocess.run(
            [str(path), "--version"], capture_output=True, text=True, errors="replace"
        )
    except OSError as exc:
        raise WranglerError(f"failed to find version for {tool_name}") from exc
    if result.returncode != 0:
        log.debug("could not find version for %s\n%s", tool_name, result.stderr)
        return True
    installed = parse_tool_version(result.stdout)
    if installed is None:
        return True
    newest = latest if latest is not None else latest_version(tool_name)
    if installed == newest:
        log.debug("installed %s version %s is up to date", tool_name, installed)
        return False
    log.info(
        "installed %s version %s is out of date with latest version %s",
        tool_name,
        installed,
        newest,
    )
    return True