from pathlib import Path

import pytest

from wrangler.config import (
    KvNamespace,
    Site,
    Target,
    WranglerError,
    missing_publish_fields,
    site_incompatible_routes,
    validate_publish_fields,
)


def test_complete_target_has_no_missing_fields():
    target = Target(account_id="acct", name="worker")
    assert missing_publish_fields(target) == []


def test_missing_account_id_and_name():
    target = Target(account_id="", name="")
    assert missing_publish_fields(target) == ["account_id", "name"]


def test_missing_namespace_fields():
    target = Target(
        account_id="acct",
        name="worker",
        kv_namespaces=[KvNamespace(binding="", id="")],
    )
    assert missing_publish_fields(target) == ["kv-namespace binding", "kv-namespace id"]


def test_validate_single_missing_field_uses_singular():
    target = Target(account_id="", name="worker")
    with pytest.raises(WranglerError) as info:
        validate_publish_fields(target)
    message = str(info.value)
    assert 'missing the field ["account_id"] which is required' in message


def test_validate_several_missing_fields_uses_plural():
    target = Target(account_id="", name="")
    with pytest.raises(WranglerError) as info:
        validate_publish_fields(target)
    assert 'fields ["account_id", "name"] which are required' in str(info.value)


def test_add_kv_namespace_creates_list():
    target = Target(account_id="acct", name="worker")
    namespace = KvNamespace(binding="__STATIC_CONTENT", id="abc", bucket="public")
    target.add_kv_namespace(namespace)
    assert target.kv_namespaces == [namespace]
    assert target.namespaces[0].bucket == Path("public")


def test_add_kv_namespace_appends():
    first = KvNamespace(binding="A", id="1")
    target = Target(account_id="acct", name="worker", kv_namespaces=[first])
    second = KvNamespace(binding="B", id="2")
    target.add_kv_namespace(second)
    assert [ns.binding for ns in target.namespaces] == ["A", "B"]


def test_site_bucket_is_path():
    site = Site(bucket="./public")
    assert site.bucket == Path("./public")


def test_site_incompatible_routes():
    patterns = ["example.com/*", "example.com/blog", "*.example.com/*"]
    assert site_incompatible_routes(patterns) == ["example.com/blog"]