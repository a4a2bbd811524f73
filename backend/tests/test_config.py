"""Tests for settings and the application factory."""

import pytest
from pydantic import ValidationError

from apikit.config import Settings
from apikit.main import create_app


def test_defaults():
    config = Settings()
    assert config.default_limit == 100
    assert config.limit_param == "limit"
    assert config.page_param == "page"
    assert config.validation_failure_mode == "propagate"


def test_env_override(monkeypatch):
    monkeypatch.setenv("DEFAULT_LIMIT", "50")
    monkeypatch.setenv("VALIDATION_FAILURE_MODE", "json")
    config = Settings()
    assert config.default_limit == 50
    assert config.validation_failure_mode == "json"


def test_non_positive_default_limit_rejected():
    with pytest.raises(ValidationError, match="DEFAULT_LIMIT"):
        Settings(default_limit=0)


def test_unknown_failure_mode_rejected():
    with pytest.raises(ValidationError, match="VALIDATION_FAILURE_MODE"):
        Settings(validation_failure_mode="silent")


def test_docs_hidden_outside_dev_mode():
    assert create_app(Settings(dev_mode=False)).docs_url is None
    assert create_app(Settings(dev_mode=True)).docs_url == "/docs"
