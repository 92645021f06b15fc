from __future__ import annotations

from dataclasses import replace

import pytest

from config import settings
from services.fingerprint import fingerprint
from services.registry import DomainNotAllowedError, UrlRegistry, ValidationError, validate_url


@pytest.mark.parametrize(
    "url",
    ["", "   ", None, 42, "example.com", "ftp://example.com/file", "https://", "http:///path"],
)
def test_validate_url_rejects_malformed(url):
    with pytest.raises(ValidationError):
        validate_url(url)


def test_validate_url_strips_whitespace():
    assert validate_url("  https://example.com/a?b=1 ") == "https://example.com/a?b=1"


def test_validate_url_checks_allow_list_case_insensitively():
    assert validate_url("https://Example.COM/x", ("example.com",)) == "https://Example.COM/x"

    with pytest.raises(DomainNotAllowedError) as exc_info:
        validate_url("https://evil.test/x", ("example.com",))
    assert exc_info.value.host == "evil.test"
    assert exc_info.value.category == "validation"


def test_add_url_creates_zeroed_record(store):
    registry = UrlRegistry(store)

    record = registry.add_url("https://example.com")

    assert record.key == fingerprint("https://example.com")
    assert store.get(record.key) == record
    assert (record.success_count, record.fail_count, record.last_visited) == (0, 0, None)


def test_add_url_with_disallowed_domain_creates_nothing(store, monkeypatch):
    monkeypatch.setenv("ALLOWED_DOMAINS", "example.com, status.example.org")
    settings.reload()
    registry = UrlRegistry(store)
    registry.add_url("https://status.example.org/health")

    with pytest.raises(DomainNotAllowedError):
        registry.add_url("https://not-allowed.test/")

    assert store.count() == 1


def test_re_adding_url_resets_history(store):
    registry = UrlRegistry(store)
    record = registry.add_url("https://example.com")
    store.put(replace(record, success_count=3))

    registry.add_url("https://example.com")

    assert store.count() == 1
    assert store.get(record.key).success_count == 0


def test_list_and_delete(store):
    registry = UrlRegistry(store)
    first = registry.add_url("https://example.com/1")
    registry.add_url("https://example.com/2")

    assert {record.url for record in registry.list_urls()} == {
        "https://example.com/1",
        "https://example.com/2",
    }

    assert registry.delete_url(first.key) is True
    assert [record.url for record in registry.list_urls()] == ["https://example.com/2"]


def test_delete_unknown_key_succeeds_without_changes(store):
    registry = UrlRegistry(store)
    registry.add_url("https://example.com")

    assert registry.delete_url("0" * 40) is False
    assert store.count() == 1


def test_delete_requires_key(store):
    with pytest.raises(ValidationError):
        UrlRegistry(store).delete_url("")
