"""Base API client for the Mythic Beasts provisioning API.

Handles bearer token injection, user agent, request construction and the
client-credentials sign-in. Failed requests are surfaced, never retried.
Redirects are not followed: provisioning answers with 303 See Other and the
poller needs to see it.
"""

from __future__ import annotations

import base64
import logging
import threading
from typing import Any

import httpx
from pydantic import ValidationError

from mythicbeasts.auth import Credentials, TokenManager
from mythicbeasts.config import Settings
from mythicbeasts.errors import (
    AuthFailed,
    Cancelled,
    DecodeError,
    MissingCredentials,
    UnexpectedStatus,
)
from mythicbeasts.models.auth import TokenResponse
from mythicbeasts.polling import ReadyCheck, poll_provisioning
from mythicbeasts.urls import resolve_url
from mythicbeasts.utils.responses import read_body, truncate_body

logger = logging.getLogger(__name__)


# Statuses a DELETE treats as success; 404 means it is already gone
DELETE_OK_STATUSES = (200, 202, 204, 404)


def raise_if_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise Cancelled()


class MythicBeastsClient:
    """HTTP client for the Mythic Beasts API with token lifecycle handling.

    One instance may be shared between threads: the underlying
    ``httpx.Client`` pool is thread-safe and the token state is guarded by
    the ``TokenManager`` lock.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self.auth_url = self._settings.auth_url
        self.user_agent = self._settings.user_agent
        self.poll_interval = self._settings.poll_interval
        self._timeout = httpx.Timeout(self._settings.http_timeout)
        self._http = http or httpx.Client(timeout=self._timeout, follow_redirects=False)
        self._tokens = TokenManager(self._settings.credentials, self._sign_in)
        if self._settings.token:
            self._tokens.set_token(self._settings.token)

    @property
    def tokens(self) -> TokenManager:
        return self._tokens

    def new_request(
        self,
        method: str,
        base_url: str,
        endpoint: str,
        content: bytes | str | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Request:
        """Build a request for ``endpoint`` resolved against ``base_url``.

        Raises:
            InvalidBaseURL, InvalidEndpoint: from URL resolution.
        """
        url = resolve_url(base_url, endpoint)
        return httpx.Request(
            method,
            url,
            content=content,
            headers=headers,
            extensions={"timeout": self._timeout.as_dict()},
        )

    def send(self, request: httpx.Request, cancel: threading.Event | None = None) -> httpx.Response:
        """Dispatch a request, attaching the bearer token and user agent.

        A request that already carries an Authorization header is sent as-is.
        Otherwise the current token is fetched (signing in if required) and,
        when there is one, attached and marked as used.

        Raises:
            Cancelled: ``cancel`` was set before dispatch.
            httpx.HTTPError: transport failures, unwrapped.
        """
        raise_if_cancelled(cancel)

        if "Authorization" not in request.headers:
            token = self._tokens.ensure_token(cancel)
            if token:
                request.headers["Authorization"] = f"Bearer {token}"
                self._tokens.mark_used()
        if self.user_agent and "User-Agent" not in request.headers:
            request.headers["User-Agent"] = self.user_agent

        raise_if_cancelled(cancel)
        logger.debug(f"{request.method} {request.url}")
        response = self._http.send(request, follow_redirects=False)
        logger.debug(f"Response: {response.status_code}")
        return response

    def request(
        self,
        method: str,
        base_url: str,
        endpoint: str,
        content: bytes | str | None = None,
        headers: dict[str, str] | None = None,
        cancel: threading.Event | None = None,
    ) -> httpx.Response:
        """Convenience wrapper around new_request + send."""
        req = self.new_request(method, base_url, endpoint, content=content, headers=headers)
        return self.send(req, cancel)

    def get(self, base_url: str, endpoint: str, cancel: threading.Event | None = None) -> httpx.Response:
        """Issue a GET. The caller reads the body with ``read_body``."""
        return self.request("GET", base_url, endpoint, cancel=cancel)

    def delete(self, base_url: str, endpoint: str, cancel: threading.Event | None = None) -> None:
        """Issue a DELETE, treating 404 as already deleted."""
        response = self.request("DELETE", base_url, endpoint, cancel=cancel)
        body = read_body(response)
        if response.status_code not in DELETE_OK_STATUSES:
            raise UnexpectedStatus(response.status_code, truncate_body(body))

    def poll_provisioning(
        self,
        base_url: str,
        poll_location: str,
        timeout: float,
        identifier: str,
        check: ReadyCheck,
        cancel: threading.Event | None = None,
    ) -> str:
        """Block until provisioning at ``poll_location`` finishes; see polling.poll_provisioning."""
        return poll_provisioning(
            self, base_url, poll_location, timeout, identifier, check, cancel=cancel
        )

    def _sign_in(self, credentials: Credentials, cancel: threading.Event | None = None) -> TokenResponse:
        """Exchange the API key for a bearer token (client-credentials grant)."""
        if not credentials.is_complete:
            raise MissingCredentials()

        basic = base64.b64encode(f"{credentials.key_id}:{credentials.secret}".encode()).decode()
        response = self.request(
            "POST",
            self.auth_url,
            "/login",
            content="grant_type=client_credentials",
            headers={
                "Authorization": f"Basic {basic}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            cancel=cancel,
        )
        body = read_body(response)

        if response.status_code != 200:
            raise AuthFailed(response.status_code, body)

        try:
            token = TokenResponse.model_validate_json(body)
        except ValidationError as e:
            raise DecodeError(f"could not decode auth response: {e}", body) from e

        logger.info(f"Signed in, token expires after {token.expires_in}s of inactivity")
        return token

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()

    def __enter__(self) -> MythicBeastsClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
