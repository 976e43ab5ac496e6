"""Collecting a bucket directory's files as hashed KV keys and values."""

from __future__ import annotations

import base64
import hashlib
import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePath
from typing import Iterator

from .config import Target, WranglerError

log = logging.getLogger(__name__)

KEY_MAX_SIZE = 512
VALUE_MAX_SIZE = 10 * 1024 * 1024

REQUIRED_IGNORE_FILES = ("node_modules",)
NODE_MODULES = "node_modules"

AssetManifest = dict[str, str]


@dataclass
class KeyValuePair:
    """One entry of a bulk KV write."""

    key: str
    value: str
    expiration: int | None = None
    expiration_ttl: int | None = None
    base64: bool | None = None


@dataclass(frozen=True)
class _Glob:
    """An include or ignore pattern matched gitignore-style against relative paths."""

    pattern: str
    whitelist: bool
    dir_only: bool
    anchored: bool

    @classmethod
    def parse(cls, text: str, whitelist: bool) -> "_Glob":
        dir_only = text.endswith("/")
        pattern = text.rstrip("/")
        anchored = "/" in pattern
        return cls(pattern.lstrip("/"), whitelist, dir_only, anchored)

    def matches(self, parts: tuple[str, ...], is_dir: bool) -> bool:
        """Whether the path, or one of its ancestors below the root, matches."""
        last = len(parts)
        for depth in range(1, last + 1):
            if self.dir_only and depth == last and not is_dir:
                continue
            candidate = "/".join(parts[:depth]) if self.anchored else parts[depth - 1]
            if fnmatchcase(candidate, self.pattern):
                return True
        return False


def _build_overrides(target: Target) -> list[_Glob]:
    globs = []
    for ignored in REQUIRED_IGNORE_FILES:
        globs.append(_Glob.parse(ignored, whitelist=False))
        log.info("Ignoring %s", ignored)
    site = target.site
    if site is not None:
        if site.include is not None:
            for included in site.include:
                globs.append(_Glob.parse(included, whitelist=True))
                log.info("Including %s", included)
        elif site.exclude is not None:
            for excluded in site.exclude:
                globs.append(_Glob.parse(excluded, whitelist=False))
                log.info("Ignoring %s", excluded)
    return globs


def _verdict(globs: list[_Glob], parts: tuple[str, ...], is_dir: bool) -> bool | None:
    """True to include, False to ignore, None when no pattern matches."""
    for glob in reversed(globs):
        if glob.matches(parts, is_dir):
            return glob.whitelist
    return None


def _walk(root: Path, current: Path, globs: list[_Glob], has_whitelist: bool) -> Iterator[Path]:
    for entry in sorted(current.iterdir()):
        is_dir = entry.is_dir() and not entry.is_symlink()
        verdict = _verdict(globs, entry.relative_to(root).parts, is_dir)
        if verdict is False:
            continue
        if verdict is None:
            if entry.name.startswith("."):
                continue
            if has_whitelist and not is_dir:
                continue
        yield entry
        if is_dir:
            yield from _walk(root, entry, globs, has_whitelist)


def iter_directory(target: Target, directory: str | Path) -> Iterator[Path]:
    """Walk a bucket directory, yielding it and the entries that should be uploaded.

    Hidden entries and node_modules are skipped; the site's include list, or
    failing that its exclude list, filters what remains. .gitignore is not read.
    """
    directory = Path(directory)
    if directory.name == NODE_MODULES:
        raise WranglerError("Your directory of files to upload cannot be named node_modules.")
    globs = _build_overrides(target)
    has_whitelist = any(glob.whitelist for glob in globs)

    def walk() -> Iterator[Path]:
        yield directory
        yield from _walk(directory, directory, globs, has_whitelist)

    return walk()


def _files(target: Target, directory: Path) -> Iterator[Path]:
    return (path for path in iter_directory(target, directory) if path.is_file())


def directory_keys_values(
    target: Target, directory: str | Path, verbose: bool = False
) -> tuple[list[KeyValuePair], AssetManifest]:
    """Key-value pairs for every file in the directory, and the asset manifest."""
    directory = Path(directory)
    pairs: list[KeyValuePair] = []
    manifest: AssetManifest = {}
    for path in _files(target, directory):
        if verbose:
            print(f"🌀  Preparing {path}")
        validate_file_size(path)
        b64_value = base64.b64encode(path.read_bytes()).decode("ascii")
        url_safe_path, key = generate_path_and_key(path, directory, b64_value)
        validate_key_size(key)
        pairs.append(KeyValuePair(key=key, value=b64_value, base64=True))
        manifest[url_safe_path] = key
    return pairs, manifest


def directory_keys_only(target: Target, directory: str | Path) -> list[str]:
    """The hashed keys for every file in the directory."""
    directory = Path(directory)
    keys = []
    for path in _files(target, directory):
        b64_value = base64.b64encode(path.read_bytes()).decode("ascii")
        _, key = generate_path_and_key(path, directory, b64_value)
        validate_key_size(key)
        keys.append(key)
    return keys


def validate_file_size(path: str | Path) -> None:
    """Raise WranglerError if the file is larger than a KV value may be."""
    size = Path(path).stat().st_size
    if size > VALUE_MAX_SIZE:
        raise WranglerError(
            f"File `{path}` of {size} bytes exceeds the maximum value size limit "
            f"of {VALUE_MAX_SIZE} bytes"
        )


def validate_key_size(key: str) -> None:
    """Raise WranglerError if the key is longer than a KV key may be."""
    size = len(key.encode("utf-8"))
    if size > KEY_MAX_SIZE:
        raise WranglerError(
            f"Path `{key}` of {size} bytes exceeds the maximum key size limit "
            f"of {KEY_MAX_SIZE} bytes"
        )


def generate_url_safe_path(path: str | PurePath) -> str:
    """The path's components joined with forward slashes."""
    return "/".join(PurePath(path).parts)


def get_digest(value: str | bytes) -> str:
    """Lowercase hex SHA-256 of the value."""
    data = value.encode("utf-8") if isinstance(value, str) else value
    return hashlib.sha256(data).hexdigest()


def _split_name(name: str) -> tuple[str, str | None]:
    if name == "..":
        return name, None
    dot = name.rfind(".")
    if dot <= 0:
        return name, None
    return name[:dot], name[dot + 1 :]


def generate_path_with_hash(path: str | PurePath, hashed_value: str) -> str:
    """Insert the hash between the file's stem and its extension."""
    path = PurePath(path)
    if not path.name:
        raise WranglerError(f"no file_stem for path {path}")
    stem, extension = _split_name(path.name)
    file_name = f"{stem}.{hashed_value}"
    if extension is not None:
        file_name += f".{extension}"
    return generate_url_safe_path(path.with_name(file_name))


def generate_path_and_key(
    path: str | PurePath, directory: str | PurePath, value: str | None = None
) -> tuple[str, str]:
    """The url-safe path relative to the directory, and the key versioned by value."""
    try:
        relative = PurePath(path).relative_to(PurePath(directory))
    except ValueError as exc:
        raise WranglerError(f"{path} is not inside {directory}") from exc
    url_safe_path = generate_url_safe_path(relative)
    if value is None:
        return url_safe_path, url_safe_path
    return url_safe_path, generate_path_with_hash(relative, get_digest(value))