"""
tests/test_config.py -- Unit tests for core/config.py Settings validation.

Settings is instantiated directly (never via the cached get_settings()) with
_env_file=None so a developer's local .env cannot leak into the tests.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings

GOOD_KEY = "k" * 32


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("DEBUG", "SECRET_KEY", "TOKEN_EXPIRE_SECONDS", "DATABASE_URL", "SEED_SAMPLE_DATA"):
        monkeypatch.delenv(name, raising=False)


def test_production_requires_secret_key():
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings(_env_file=None)


def test_debug_generates_secret_key():
    settings = Settings(_env_file=None, debug=True)
    assert len(settings.secret_key) >= 32


def test_generated_keys_differ_between_instances():
    assert Settings(_env_file=None, debug=True).secret_key != Settings(_env_file=None, debug=True).secret_key


def test_short_secret_key_rejected(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "too-short")
    with pytest.raises(ValidationError, match="at least 32"):
        Settings(_env_file=None)


def test_values_read_from_environment(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", GOOD_KEY)
    monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "600")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "true")
    settings = Settings(_env_file=None)
    assert settings.secret_key == GOOD_KEY
    assert settings.token_expire_seconds == 600
    assert settings.database_url == "sqlite:///:memory:"
    assert settings.seed_sample_data is True
    assert settings.debug is False


def test_defaults():
    settings = Settings(_env_file=None, secret_key=GOOD_KEY)
    assert settings.token_expire_seconds == 86400
    assert settings.database_url.startswith("sqlite:///")
    assert settings.database_url.endswith("bookshelf.db")
    assert settings.seed_sample_data is False


@pytest.mark.parametrize("ttl", [0, -5])
def test_non_positive_ttl_rejected(ttl):
    with pytest.raises(ValidationError, match="TOKEN_EXPIRE_SECONDS"):
        Settings(_env_file=None, secret_key=GOOD_KEY, token_expire_seconds=ttl)
