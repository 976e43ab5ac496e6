import pytest

from wrangler.config import WranglerError
from wrangler.key_list import KeyList, extract_cursor


def make_fetcher(pages):
    calls = []

    def fetch(cursor, prefix):
        calls.append((cursor, prefix))
        return pages[cursor]

    return fetch, calls


def test_extract_cursor_values():
    assert extract_cursor({"cursor": "next-page"}) == "next-page"
    assert extract_cursor({"cursor": ""}) is None


def test_extract_cursor_requires_result_info():
    with pytest.raises(WranglerError):
        extract_cursor(None)


def test_single_page_yields_keys_last_first():
    fetch, calls = make_fetcher({None: (["a", "b", "c"], {"cursor": ""})})
    assert list(KeyList(fetch)) == ["c", "b", "a"]
    assert calls == [(None, None)]


def test_follows_cursor_across_pages():
    pages = {
        None: (["a", "b"], {"cursor": "p2"}),
        "p2": (["c"], {"cursor": ""}),
    }
    fetch, calls = make_fetcher(pages)
    keys = list(KeyList(fetch, prefix="pre"))
    assert sorted(keys) == ["a", "b", "c"]
    assert calls == [(None, "pre"), ("p2", "pre")]


def test_empty_namespace_yields_nothing():
    fetch, calls = make_fetcher({None: ([], {"cursor": ""})})
    assert list(KeyList(fetch)) == []
    assert len(calls) == 1


def test_exhausted_iterator_stays_exhausted():
    fetch, calls = make_fetcher({None: (["only"], {"cursor": ""})})
    key_list = KeyList(fetch)
    assert next(key_list) == "only"
    with pytest.raises(StopIteration):
        next(key_list)
    with pytest.raises(StopIteration):
        next(key_list)
    assert len(calls) == 1


def test_fetch_errors_propagate():
    def fetch(cursor, prefix):
        raise WranglerError("api down")

    with pytest.raises(WranglerError, match="api down"):
        next(KeyList(fetch))