"""Tests for account key validation and the session secret cache."""
import base64

import pytest

from azure_blob_sas.sas.domains.secret_cache import (
    INVALID_SECRET_MESSAGE,
    SecretCache,
    validate_account_key,
)


class TestValidateAccountKey:
    """Test suite for storage account key validation."""

    def test_accepts_64_byte_key(self, account_key):
        assert validate_account_key(account_key) is None

    @pytest.mark.parametrize("value", [
        None,
        "",
        base64.b64encode(b"x" * 63).decode(),
        base64.b64encode(b"x" * 65).decode(),
        base64.b64encode(b"x" * 32).decode(),
        "not base64 at all!",
        "abc",
    ])
    def test_rejects_everything_else(self, value):
        assert validate_account_key(value) == INVALID_SECRET_MESSAGE


class TestSecretCache:
    """Test suite for SecretCache."""

    def test_remember_and_get(self, account_key):
        cache = SecretCache()
        cache.remember("acct", account_key)

        assert cache.get("acct") == account_key
        assert "acct" in cache
        assert len(cache) == 1

    def test_account_names_are_case_sensitive(self, account_key):
        cache = SecretCache()
        cache.remember("acct", account_key)

        assert cache.get("ACCT") is None

    def test_remember_replaces_previous_secret(self, account_key, other_account_key):
        cache = SecretCache()
        cache.remember("acct", account_key)
        cache.remember("acct", other_account_key)

        assert cache.get("acct") == other_account_key
        assert len(cache) == 1

    def test_repr_hides_secrets(self, account_key):
        cache = SecretCache()
        cache.remember("acct", account_key)

        assert account_key not in repr(cache)
        assert "acct" in repr(cache)
