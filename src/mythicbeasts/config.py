"""Configuration management for the Mythic Beasts client.

Loads credentials and client tuning from the environment (and .env), and
per-family API base URLs from an optional config/endpoints.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from mythicbeasts.auth import Credentials


AUTH_URL = "https://auth.mythic-beasts.com"
DEFAULT_USER_AGENT = "mythicbeasts-python"

DEFAULT_ENDPOINTS = {
    "vps": "https://api.mythic-beasts.com/beta",
    "pi": "https://api.mythic-beasts.com/beta",
    "proxy": "https://api.mythic-beasts.com/proxy",
}


class Settings(BaseModel):
    """Client settings loaded from environment variables."""
    key_id: str = Field(default="", description="API key ID")
    secret: str = Field(default="", description="API key secret")
    token: str = Field(default="", description="Pre-issued bearer token, used when no key is set")
    auth_url: str = Field(default=AUTH_URL, description="Auth service base URL")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header value")
    poll_interval: float = Field(default=10.0, description="Seconds between provisioning polls")
    http_timeout: float = Field(default=30.0, description="Per-request HTTP timeout in seconds")
    provision_timeout: float = Field(default=300.0, description="Default provisioning timeout in seconds")

    @property
    def credentials(self) -> Credentials:
        return Credentials(key_id=self.key_id, secret=self.secret)


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings = Field(default_factory=Settings)
    endpoints: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ENDPOINTS))

    def get_endpoint(self, family: str) -> str:
        """Get the base URL for a resource family (vps, pi, proxy)."""
        family = family.lower()
        if family not in self.endpoints:
            available = ", ".join(sorted(self.endpoints.keys()))
            raise ValueError(f"Unknown resource family '{family}'. Available: {available}")
        return self.endpoints[family]


def _find_project_root() -> Path:
    """Walk up from the working directory to the first one holding config/ or .env."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / "config" / "endpoints.yaml").exists() or (parent / ".env").exists():
            return parent
    return current


def _load_endpoints(project_root: Path) -> dict[str, str]:
    """Load base URL overrides from endpoints.yaml on top of the defaults."""
    endpoints = dict(DEFAULT_ENDPOINTS)
    endpoints_path = project_root / "config" / "endpoints.yaml"
    if not endpoints_path.exists():
        return endpoints

    with open(endpoints_path) as f:
        data = yaml.safe_load(f) or {}

    for family, base_url in (data.get("endpoints") or {}).items():
        endpoints[str(family).lower()] = str(base_url)
    return endpoints


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Accepts both MYTHICBEASTS_* names and the bare ``keyid``/``secret`` names
    used in the Mythic Beasts control panel.
    """
    return Settings(
        key_id=_env("MYTHICBEASTS_KEY_ID", "keyid"),
        secret=_env("MYTHICBEASTS_SECRET", "secret"),
        token=_env("MYTHICBEASTS_TOKEN"),
        auth_url=_env("MYTHICBEASTS_AUTH_URL", default=AUTH_URL),
        user_agent=_env("MYTHICBEASTS_USER_AGENT", default=DEFAULT_USER_AGENT),
        poll_interval=float(_env("MYTHICBEASTS_POLL_INTERVAL", default="10")),
        http_timeout=float(_env("MYTHICBEASTS_HTTP_TIMEOUT", default="30")),
        provision_timeout=float(_env("MYTHICBEASTS_PROVISION_TIMEOUT", default="300")),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Config(settings=_load_settings(), endpoints=_load_endpoints(project_root))
