"""Tests for core.config (settings -> credential config, user .env writer)."""

from datetime import datetime, timezone

import pytest

from core.config import AppSettings, ClientSettings, load_settings, write_user_env_vars
from core.domain.credentials import AppCredential, TokenCredential, build_credential
from core.domain.environment import Environment
from core.domain.errors import InvalidCredentialConfigError


def test_defaults(settings):
    assert settings.orders_page_size == 100
    assert settings.seller_list_page_size == 200
    assert settings.environment is Environment.SANDBOX
    assert settings.auth_type == "OAUTH"


def test_env_vars_are_read(monkeypatch):
    monkeypatch.setenv("EBAY_D2_TOKEN", "ENVTOKEN")
    monkeypatch.setenv("EBAY_D2_ENVIRONMENT", "production")
    monkeypatch.setenv("EBAY_D2_HTTP_TIMEOUT_SECONDS", "5")

    settings = AppSettings(_env_file=None)

    assert settings.token == "ENVTOKEN"
    assert settings.environment is Environment.PRODUCTION
    assert settings.http_timeout_seconds == 5.0


def test_token_credential_config():
    settings = AppSettings(
        _env_file=None,
        token="T",
        user_id="seller01",
        expire=datetime(2030, 1, 1, tzinfo=timezone.utc),
    )

    config = settings.credential_config()
    credential = build_credential(config)

    assert "appConfig" not in config
    assert isinstance(credential, TokenCredential)
    assert credential.user_id == "seller01"
    assert credential.is_expired is False


def test_app_credential_config():
    settings = AppSettings(
        _env_file=None,
        token="T",
        auth_type="AUTHNAUTH",
        client_id="C",
        dev_id="D",
        cert_id="E",
    )

    credential = build_credential(settings.credential_config())

    assert isinstance(credential, AppCredential)
    assert credential.auth_headers()["X-EBAY-API-DEV-NAME"] == "D"


def test_write_user_env_vars_merges_and_skips_none(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# old\nEBAY_D2_TOKEN=old\nEBAY_D2_ENVIRONMENT='sandbox'\n", encoding="utf-8")

    write_user_env_vars({"EBAY_D2_TOKEN": "new", "EBAY_D2_EXPIRE": None}, env_path=env_path)

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert "EBAY_D2_TOKEN=new" in lines
    assert "EBAY_D2_ENVIRONMENT=sandbox" in lines
    assert not any(line.startswith("EBAY_D2_EXPIRE") for line in lines)


def test_client_settings_skip_credential_fields(monkeypatch):
    monkeypatch.setenv("EBAY_D2_EXPIRE", "not-a-date")
    monkeypatch.setenv("EBAY_D2_MAX_PAGES", "7")

    settings = load_settings(ClientSettings, _env_file=None)

    assert settings.max_pages == 7
    assert not hasattr(settings, "expire")


def test_load_settings_wraps_validation_errors(monkeypatch):
    monkeypatch.setenv("EBAY_D2_EXPIRE", "not-a-date")

    with pytest.raises(InvalidCredentialConfigError, match="EBAY_D2_"):
        load_settings(AppSettings, _env_file=None)
