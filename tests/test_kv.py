import pytest

from wrangler import kv
from wrangler.config import KvNamespace, Target, WranglerError
from wrangler.http import ApiError


def make_target(namespaces=None, account_id="", name="test-target"):
    return Target(account_id=account_id, name=name, kv_namespaces=namespaces)


def test_it_can_detect_duplicate_bindings():
    target = make_target(
        [
            KvNamespace(binding="KV", id="fake"),
            KvNamespace(binding="KV", id="fake"),
        ]
    )
    with pytest.raises(WranglerError, match="duplicated"):
        kv.get_namespace_id(target, "")


def test_has_duplicate_namespaces():
    dup = make_target([KvNamespace("A", "1"), KvNamespace("A", "2")])
    unique = make_target([KvNamespace("A", "1"), KvNamespace("B", "2")])
    assert kv.has_duplicate_namespaces(dup) is True
    assert kv.has_duplicate_namespaces(unique) is False
    assert kv.has_duplicate_namespaces(make_target()) is False


def test_get_namespace_id_found_and_missing():
    target = make_target([KvNamespace("A", "id-a"), KvNamespace("B", "id-b")])
    assert kv.get_namespace_id(target, "B") == "id-b"
    with pytest.raises(WranglerError) as info:
        kv.get_namespace_id(target, "C")
    assert str(info.value) == 'Namespace binding "C" not found in "test-target"'


@pytest.mark.parametrize("binding", ["hi there", "1234"])
def test_it_can_detect_invalid_binding(binding):
    with pytest.raises(WranglerError):
        kv.validate_binding(binding)


@pytest.mark.parametrize("binding", ["ONE", "TWO_TWO", "__private_variable", "rud3_var"])
def test_it_can_detect_valid_binding(binding):
    assert kv.validate_binding(binding) is None


def test_empty_binding_is_invalid():
    with pytest.raises(WranglerError):
        kv.validate_binding("")


def test_validate_target():
    with pytest.raises(WranglerError) as info:
        kv.validate_target(make_target())
    assert str(info.value) == (
        'Your wrangler.toml is missing the following field(s): ["account_id"]'
    )
    assert kv.validate_target(make_target(account_id="abc")) is None


@pytest.mark.parametrize("code", [7000, 7003])
def test_kv_help_account_id(code):
    assert "account_id" in kv.kv_help(code)


@pytest.mark.parametrize("code", [10010, 10011, 10012, 10013, 10014, 10018])
def test_kv_help_namespace_errors(code):
    assert kv.kv_help(code) == (
        "Run `wrangler kv:namespace list` to see your existing namespaces with IDs"
    )


def test_kv_help_other_codes():
    assert kv.kv_help(10009) == "Run `wrangler kv:key list` to see your existing keys"
    assert kv.kv_help(10022) == "See documentation"
    assert kv.kv_help(10035) == "Consider moving this namespace"
    assert kv.kv_help(10026).startswith("Workers KV is a paid feature")
    assert kv.kv_help(1) == ""


def test_format_error_includes_help():
    text = kv.format_error(400, [ApiError(10009, "key not found")])
    assert "Code 10009: key not found" in text
    assert "Run `wrangler kv:key list` to see your existing keys" in text
    assert not text.endswith("\n")


def test_url_encode_key():
    assert kv.url_encode_key("plain-key_1.txt") == "plain-key_1.txt"
    assert kv.url_encode_key("a b/c") == "a%20b%2Fc"
    assert kv.url_encode_key("100%?") == "100%25%3F"
    assert kv.url_encode_key("a:b@c") == "a:b@c"


def test_namespace_snippet():
    assert kv.namespace_snippet("KV", "abc", True) == '{ binding = "KV", id = "abc" }'
    assert kv.namespace_snippet("KV", "abc", False) == (
        'kv-namespaces = [ \n\t { binding = "KV", id = "abc" } \n]'
    )


def test_site_namespace_title():
    target = make_target(name="blog")
    assert kv.site_namespace_title(target, False) == "__blog-workers_sites_assets"
    assert kv.site_namespace_title(target, True) == "__blog-workers_sites_assets_preview"