"""Tests for ApiKey validation and timestamp formatting."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from credvault.vault.models import ApiKey, format_updated_at, is_valid_key_name


class TestKeyName:
    @pytest.mark.parametrize("name", ["OPENAI_API_KEY", "A", "KEY_2", "_"])
    def test_valid(self, name):
        assert is_valid_key_name(name)

    @pytest.mark.parametrize("name", ["", "lower", "HAS SPACE", "DASH-KEY", "ÄKEY"])
    def test_invalid(self, name):
        assert not is_valid_key_name(name)


class TestApiKey:
    def test_from_record(self):
        key = ApiKey.model_validate(
            {"key_name": "OPENAI_API_KEY", "key_preview": "sk-t...123", "updated_at": "2026-10-17T12:00:00Z"}
        )
        assert key.key_name == "OPENAI_API_KEY"
        assert key.key_preview == "sk-t...123"
        assert key.updated_at == "2026-10-17T12:00:00Z"

    def test_extra_fields_ignored(self):
        key = ApiKey.model_validate({"key_name": "X_KEY", "id": 7, "category": "credential"})
        assert key.key_name == "X_KEY"
        assert not hasattr(key, "category")

    def test_invalid_name_rejected(self):
        with pytest.raises(ValidationError):
            ApiKey(key_name="not-canonical")

    def test_datetime_timestamp(self):
        key = ApiKey(key_name="X_KEY", updated_at=datetime(2026, 10, 17, tzinfo=UTC))
        assert key.updated_at.startswith("2026-10-17")

    def test_null_timestamp(self):
        key = ApiKey.model_validate({"key_name": "X_KEY", "updated_at": None})
        assert key.updated_at == ""


class TestFormatUpdatedAt:
    def test_iso_timestamp(self):
        assert format_updated_at("2026-10-17T12:00:00+00:00") == "Oct 17, 2026"

    def test_zulu_suffix(self):
        assert format_updated_at("2026-03-05T08:30:00Z") == "Mar 5, 2026"

    def test_unparsable_returned_as_is(self):
        assert format_updated_at("yesterday") == "yesterday"

    def test_empty(self):
        assert format_updated_at("") == ""
