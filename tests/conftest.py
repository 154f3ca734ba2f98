"""Shared fixtures for the mythicbeasts test suite."""
from __future__ import annotations

from typing import Callable

import httpx
import pytest

from mythicbeasts.client import MythicBeastsClient
from mythicbeasts.config import Config, Settings

API_URL = "https://api.example.com/beta"
AUTH_URL = "https://auth.example.com"


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        key_id="test-key",
        secret="test-secret",
        auth_url=AUTH_URL,
        user_agent="mythicbeasts-tests",
        poll_interval=0.005,
        http_timeout=5.0,
        provision_timeout=1.0,
    )


@pytest.fixture
def anon_settings(fake_settings) -> Settings:
    """Settings with no API key: requests go out unauthenticated."""
    return fake_settings.model_copy(update={"key_id": "", "secret": ""})


@pytest.fixture
def fake_config(fake_settings) -> Config:
    return Config(
        settings=fake_settings,
        endpoints={"vps": API_URL, "pi": API_URL, "proxy": "https://api.example.com/proxy"},
    )


@pytest.fixture
def make_client(fake_settings) -> Callable[..., MythicBeastsClient]:
    """Build a client whose HTTP traffic goes to an httpx.MockTransport handler."""
    clients: list[MythicBeastsClient] = []

    def _make(handler, settings: Settings | None = None) -> MythicBeastsClient:
        http = httpx.Client(transport=httpx.MockTransport(handler))
        client = MythicBeastsClient(settings or fake_settings, http=http)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


def login_ok(access_token: str = "tok-abc", expires_in: int | None = 300) -> httpx.Response:
    """A successful /login response."""
    payload: dict = {"access_token": access_token, "token_type": "bearer"}
    if expires_in is not None:
        payload["expires_in"] = expires_in
    return httpx.Response(200, json=payload)
