"""Tests for key option flattening and key name resolution."""

from __future__ import annotations

from credvault.catalog.models import ServiceCatalog
from credvault.catalog.resolver import (
    CUSTOM_SELECTION,
    CustomKey,
    KeyOptionIndex,
    KnownKey,
    describe,
    flatten,
    normalize_key_name,
    parse_selection,
    resolve,
)


class TestFlatten:
    def test_one_option_per_slot(self, catalog):
        """Option count equals the total number of key slots."""
        options = flatten(catalog)
        assert len(options) == sum(len(s.keys) for s in catalog)
        assert len(options) == 4

    def test_unique_key_names(self, catalog):
        names = [o.key_name for o in flatten(catalog)]
        assert len(names) == len(set(names))

    def test_catalog_then_slot_order(self, catalog):
        names = [o.key_name for o in flatten(catalog)]
        assert names == [
            "OPENAI_API_KEY",
            "TWITTER_CONSUMER_KEY",
            "TWITTER_CONSUMER_SECRET",
            "GITHUB_TOKEN",
        ]

    def test_option_fields(self, catalog):
        opt = flatten(catalog)[1]
        assert opt.label == "TWITTER_CONSUMER_KEY — Twitter Consumer Key"
        assert opt.service_label == "Twitter"
        assert opt.description == "Post to X/Twitter"
        assert opt.url == "https://developer.x.com"

    def test_empty_catalog(self):
        assert flatten(ServiceCatalog()) == []

    def test_pure(self, catalog):
        """Recomputing gives equal results."""
        assert flatten(catalog) == flatten(catalog)


class TestNormalize:
    def test_strips_invalid_and_uppercases(self):
        assert normalize_key_name("my key!!") == "MYKEY"

    def test_keeps_digits_and_underscores(self):
        assert normalize_key_name("vercel_token_2") == "VERCEL_TOKEN_2"

    def test_empty(self):
        assert normalize_key_name("") == ""

    def test_all_invalid(self):
        assert normalize_key_name("-- !! --") == ""


class TestResolve:
    def test_custom_normalized(self):
        assert resolve(CustomKey("my key!!")) == "MYKEY"

    def test_custom_sentinel_string(self):
        assert resolve(CUSTOM_SELECTION, "my key!!") == "MYKEY"

    def test_custom_empty(self):
        assert resolve(CUSTOM_SELECTION, "") == ""
        assert resolve(CustomKey("")) == ""

    def test_known_verbatim(self):
        """Catalog selections bypass normalization."""
        assert resolve(KnownKey("OPENAI_API_KEY")) == "OPENAI_API_KEY"
        assert resolve("OPENAI_API_KEY", "anything at all") == "OPENAI_API_KEY"

    def test_nothing_selected(self):
        assert resolve(None) == ""
        assert resolve("") == ""


class TestParseSelection:
    def test_empty(self):
        assert parse_selection("") is None

    def test_custom(self):
        assert parse_selection(CUSTOM_SELECTION, "abc") == CustomKey("abc")

    def test_known(self):
        assert parse_selection("GITHUB_TOKEN") == KnownKey("GITHUB_TOKEN")


class TestDescribe:
    def test_known_key(self, catalog):
        assert describe("OPENAI_API_KEY", catalog) == "OpenAI"

    def test_second_slot(self, catalog):
        assert describe("TWITTER_CONSUMER_SECRET", catalog) == "Twitter"

    def test_unknown_key(self, catalog):
        assert describe("VERCEL_TOKEN", catalog) is None


class TestKeyOptionIndex:
    def test_matches_linear_scan(self, catalog):
        index = KeyOptionIndex(catalog)
        for opt in flatten(catalog):
            assert index.describe(opt.key_name) == describe(opt.key_name, catalog)
        assert index.describe("VERCEL_TOKEN") is None

    def test_option_for(self, catalog):
        index = KeyOptionIndex(catalog)
        opt = index.option_for("GITHUB_TOKEN")
        assert opt is not None
        assert opt.service_label == "GitHub"
        assert index.option_for("NOPE") is None

    def test_contains_and_len(self, catalog):
        index = KeyOptionIndex(catalog)
        assert "OPENAI_API_KEY" in index
        assert "NOPE" not in index
        assert len(index) == 4

    def test_default_is_empty(self):
        index = KeyOptionIndex()
        assert len(index) == 0
        assert index.options == []
