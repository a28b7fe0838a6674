"""Tests for AuthSettings configuration."""

import pytest
from cryptography.fernet import Fernet
from pydantic import ValidationError

from shared.auth.settings import AuthSettings

VALID_KEY = Fernet.generate_key().decode()


class TestAuthSettings:
    def test_reads_token_key_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN_KEY", VALID_KEY)
        assert AuthSettings().token_key == VALID_KEY

    def test_missing_token_key_raises(self, monkeypatch):
        monkeypatch.delenv("AUTH_TOKEN_KEY", raising=False)
        with pytest.raises(ValidationError, match="token_key"):
            AuthSettings()

    @pytest.mark.parametrize("key", ["short", "not base64 at all!", "YWJj"])
    def test_invalid_token_key_raises(self, monkeypatch, key):
        monkeypatch.setenv("AUTH_TOKEN_KEY", key)
        with pytest.raises(ValidationError, match="token_key"):
            AuthSettings()

    def test_token_key_hidden_from_repr(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN_KEY", VALID_KEY)
        assert VALID_KEY not in repr(AuthSettings())

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN_KEY", VALID_KEY)
        monkeypatch.delenv("AUTH_PASSWORD_HASHER", raising=False)
        monkeypatch.delenv("AUTH_DATABASE_PATH", raising=False)
        settings = AuthSettings()

        assert settings.token_validity_seconds == 86400
        assert settings.database_path == "backend/storage.db"
        assert settings.password_hasher == "argon2"

    def test_database_path_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN_KEY", VALID_KEY)
        monkeypatch.setenv("AUTH_DATABASE_PATH", "custom/path/storage.db")
        assert AuthSettings().database_path == "custom/path/storage.db"

    def test_unknown_hasher_rejected(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN_KEY", VALID_KEY)
        monkeypatch.setenv("AUTH_PASSWORD_HASHER", "md5")
        with pytest.raises(ValidationError, match="password_hasher"):
            AuthSettings()

    def test_non_positive_validity_rejected(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN_KEY", VALID_KEY)
        monkeypatch.setenv("AUTH_TOKEN_VALIDITY_SECONDS", "0")
        with pytest.raises(ValidationError, match="token_validity_seconds"):
            AuthSettings()
