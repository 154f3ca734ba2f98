"""Tests for config.py — endpoint lookup, endpoints.yaml, env helpers."""
import pytest

from mythicbeasts.config import (
    AUTH_URL,
    DEFAULT_ENDPOINTS,
    Config,
    Settings,
    _env,
    _load_endpoints,
    _load_settings,
)

ENV_KEYS = [
    "MYTHICBEASTS_KEY_ID",
    "MYTHICBEASTS_SECRET",
    "MYTHICBEASTS_TOKEN",
    "MYTHICBEASTS_AUTH_URL",
    "MYTHICBEASTS_USER_AGENT",
    "MYTHICBEASTS_POLL_INTERVAL",
    "MYTHICBEASTS_HTTP_TIMEOUT",
    "MYTHICBEASTS_PROVISION_TIMEOUT",
    "keyid",
    "secret",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


# ── get_endpoint ─────────────────────────────────────────────────────

def test_get_endpoint_found(fake_config):
    assert fake_config.get_endpoint("vps") == "https://api.example.com/beta"


def test_get_endpoint_case_insensitive(fake_config):
    """Accepts uppercase and still resolves correctly."""
    assert fake_config.get_endpoint("PI") == "https://api.example.com/beta"


def test_get_endpoint_unknown(fake_config):
    with pytest.raises(ValueError, match="Unknown resource family 'dns'"):
        fake_config.get_endpoint("dns")


def test_default_endpoints():
    config = Config()
    assert config.get_endpoint("vps") == DEFAULT_ENDPOINTS["vps"]
    assert config.get_endpoint("proxy") == "https://api.mythic-beasts.com/proxy"


# ── _load_endpoints ──────────────────────────────────────────────────

def test_load_endpoints_without_file(tmp_path):
    assert _load_endpoints(tmp_path) == DEFAULT_ENDPOINTS


def test_load_endpoints_overrides(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "endpoints.yaml").write_text(
        "endpoints:\n"
        "  VPS: https://staging.example.com/beta\n"
        "  dns: https://api.example.com/dns/v2\n"
    )

    endpoints = _load_endpoints(tmp_path)
    assert endpoints["vps"] == "https://staging.example.com/beta"
    assert endpoints["dns"] == "https://api.example.com/dns/v2"
    assert endpoints["pi"] == DEFAULT_ENDPOINTS["pi"]


def test_load_endpoints_empty_file(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "endpoints.yaml").write_text("")
    assert _load_endpoints(tmp_path) == DEFAULT_ENDPOINTS


# ── _env helper ──────────────────────────────────────────────────────

def test_env_first_key(monkeypatch):
    monkeypatch.setenv("FOO", "bar")
    assert _env("FOO", "BAZ") == "bar"


def test_env_fallback_key(monkeypatch):
    monkeypatch.delenv("FOO", raising=False)
    monkeypatch.setenv("BAZ", "qux")
    assert _env("FOO", "BAZ") == "qux"


def test_env_default(monkeypatch):
    monkeypatch.delenv("FOO", raising=False)
    monkeypatch.delenv("BAZ", raising=False)
    assert _env("FOO", "BAZ", default="fallback") == "fallback"


def test_env_strips_quotes(monkeypatch):
    monkeypatch.setenv("FOO", '"hello"')
    assert _env("FOO") == "hello"


def test_env_strips_whitespace(monkeypatch):
    monkeypatch.setenv("FOO", "  hello  ")
    assert _env("FOO") == "hello"


# ── _load_settings ───────────────────────────────────────────────────

def test_load_settings_defaults(clean_env):
    settings = _load_settings()
    assert settings.key_id == ""
    assert settings.auth_url == AUTH_URL
    assert settings.user_agent == "mythicbeasts-python"
    assert settings.poll_interval == 10.0
    assert settings.http_timeout == 30.0
    assert settings.provision_timeout == 300.0


def test_load_settings_from_env(clean_env):
    clean_env.setenv("MYTHICBEASTS_KEY_ID", "kid")
    clean_env.setenv("MYTHICBEASTS_SECRET", "sec")
    clean_env.setenv("MYTHICBEASTS_AUTH_URL", "https://auth.example.com")
    clean_env.setenv("MYTHICBEASTS_POLL_INTERVAL", "2.5")
    clean_env.setenv("MYTHICBEASTS_PROVISION_TIMEOUT", "600")

    settings = _load_settings()
    assert settings.key_id == "kid"
    assert settings.secret == "sec"
    assert settings.auth_url == "https://auth.example.com"
    assert settings.poll_interval == 2.5
    assert settings.provision_timeout == 600.0


def test_load_settings_control_panel_names(clean_env):
    """Falls back to the bare keyid/secret names."""
    clean_env.setenv("keyid", "panel-id")
    clean_env.setenv("secret", "panel-secret")

    settings = _load_settings()
    assert settings.key_id == "panel-id"
    assert settings.secret == "panel-secret"


def test_load_settings_token(clean_env):
    clean_env.setenv("MYTHICBEASTS_TOKEN", "pre-issued")
    assert _load_settings().token == "pre-issued"


# ── Settings.credentials ─────────────────────────────────────────────

def test_credentials_from_settings():
    creds = Settings(key_id="kid", secret="sec").credentials
    assert creds.key_id == "kid"
    assert creds.is_complete is True


def test_credentials_incomplete_by_default():
    assert Settings().credentials.is_complete is False
