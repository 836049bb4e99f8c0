"""Tests for environment and config validation."""

import logging
from types import SimpleNamespace

import pytest

from trajectory.core.config import validate_config
from trajectory.core.validation import validate_env, EnvValidationError


def make_settings(**overrides):
    defaults = dict(
        ENV="development",
        CONFIG_STRICT=False,
        GROQ_API_KEY=None,
        REDIS_URL=None,
        ENRICHMENT_TIMEOUT_SECONDS=60.0,
    )
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.fixture(autouse=True)
def enforce_validation(monkeypatch):
    monkeypatch.delenv("SKIP_ENV_VALIDATION", raising=False)


def test_development_defaults_pass():
    assert validate_env(settings_obj=make_settings())


def test_valid_production_config_passes():
    settings = make_settings(
        ENV="production",
        GROQ_API_KEY="gsk_test",
        REDIS_URL="redis://localhost:6379/0",
    )
    assert validate_env(settings_obj=settings)


def test_missing_redis_in_production_fails():
    with pytest.raises(EnvValidationError):
        validate_env(settings_obj=make_settings(ENV="production", GROQ_API_KEY="gsk_test"))


def test_missing_groq_key_in_production_fails():
    settings = make_settings(ENV="production", REDIS_URL="redis://localhost:6379/0")
    with pytest.raises(EnvValidationError):
        validate_env(settings_obj=settings)


def test_invalid_redis_url_fails():
    with pytest.raises(EnvValidationError):
        validate_env(settings_obj=make_settings(REDIS_URL="localhost:6379"))


def test_non_positive_timeout_fails():
    with pytest.raises(EnvValidationError):
        validate_env(settings_obj=make_settings(ENRICHMENT_TIMEOUT_SECONDS=0))


def test_skip_env_validation_bypass(monkeypatch):
    monkeypatch.setenv("SKIP_ENV_VALIDATION", "1")
    assert validate_env(settings_obj=make_settings(ENV="production"))


def test_validate_config_warns_on_missing_key(caplog):
    with caplog.at_level(logging.WARNING, logger="trajectory"):
        assert validate_config(strict=False, settings_obj=make_settings())
    assert "GROQ_API_KEY" in caplog.text


def test_validate_config_strict_raises():
    with pytest.raises(RuntimeError):
        validate_config(strict=True, settings_obj=make_settings())
