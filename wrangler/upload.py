"""Uploading a bucket directory to Workers KV in size-limited batches."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AbstractSet, Callable, Iterable, Iterator

from .bucket import AssetManifest, KeyValuePair, directory_keys_values
from .config import Target, WranglerError

log = logging.getLogger(__name__)

# Half of what the API accepts, so bulk requests stay modest.
PAIRS_MAX_COUNT = 5000
UPLOAD_MAX_SIZE = 50 * 1024 * 1024

WriteBatch = Callable[[str, list[KeyValuePair]], object]


def _pair_size(pair: KeyValuePair) -> int:
    return len(pair.key.encode("utf-8")) + len(pair.value.encode("utf-8"))


def filter_files(
    pairs: Iterable[KeyValuePair], already_uploaded: AbstractSet[str]
) -> list[KeyValuePair]:
    """The pairs whose keys are not already present remotely."""
    return [pair for pair in pairs if pair.key not in already_uploaded]


def batch_pairs(pairs: Iterable[KeyValuePair]) -> Iterator[list[KeyValuePair]]:
    """Split pairs into batches of at most PAIRS_MAX_COUNT pairs and UPLOAD_MAX_SIZE bytes.

    Pairs are taken from the end of the sequence, as the upload does.
    """
    remaining = list(pairs)
    batch: list[KeyValuePair] = []
    batch_size = 0
    while remaining:
        pair = remaining.pop()
        pair_size = _pair_size(pair)
        if len(batch) + 1 > PAIRS_MAX_COUNT or batch_size + pair_size > UPLOAD_MAX_SIZE:
            if batch:
                yield batch
            batch = []
            batch_size = 0
        batch.append(pair)
        batch_size += pair_size
    if batch:
        yield batch


def upload_files(
    target: Target,
    namespace_id: str,
    path: str | Path,
    exclude_keys: AbstractSet[str] | None,
    verbose: bool,
    write_batch: WriteBatch,
) -> AssetManifest:
    """Upload the directory's files not in ``exclude_keys`` and return the asset manifest.

    ``write_batch(namespace_id, pairs)`` performs one bulk write and raises
    WranglerError on failure.
    """
    path = Path(path)
    try:
        path.stat()
    except OSError as exc:
        raise WranglerError(str(exc)) from exc
    if not path.is_dir():
        raise WranglerError("wrangler kv:bucket upload takes a directory")

    pairs, manifest = directory_keys_values(target, path, verbose)
    pairs = filter_files(pairs, exclude_keys or frozenset())

    if pairs:
        print("🌀  Uploading site files")
        total = len(pairs)
        show_progress = total > PAIRS_MAX_COUNT
        done = 0
        for batch in batch_pairs(pairs):
            try:
                write_batch(namespace_id, batch)
            except WranglerError as exc:
                raise WranglerError(f"Failed to upload file batch. {exc}") from exc
            done += len(batch)
            log.info("uploaded %d of %d pairs", done, total)
            if show_progress:
                print(f"{done}/{total}")
        if show_progress:
            print("Done Uploading")

    return manifest