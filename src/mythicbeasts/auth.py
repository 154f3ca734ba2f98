"""Bearer token lifecycle for the Mythic Beasts API.

The auth service returns ``expires_in`` once at sign-in, but the server
extends a session every time the token is used, so expiry is tracked as a
sliding TTL measured from the last use rather than from issuance.

A token that has been issued but never used is never considered expired.
That keeps the first request after sign-in from triggering a second sign-in,
but it also means an idle, never-used token is trusted indefinitely; the
server will reject it with a 401 if it has in fact lapsed.
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timedelta
from typing import Callable

from pydantic import BaseModel, ConfigDict

from mythicbeasts.models.auth import TokenResponse, TokenStatus

logger = logging.getLogger(__name__)


# Refresh this long before the sliding TTL would run out
EXPIRY_MARGIN = timedelta(seconds=10)


class Credentials(BaseModel):
    """API key ID and secret used for the client-credentials sign-in."""
    model_config = ConfigDict(frozen=True)

    key_id: str = ""
    secret: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.key_id) and bool(self.secret)


SignIn = Callable[[Credentials, threading.Event | None], TokenResponse]


def token_expired(
    expires_in: timedelta,
    last_used_at: float | None,
    now: float | None = None,
) -> bool:
    """Return True if a token is due for refresh under the sliding TTL.

    ``last_used_at`` and ``now`` are ``time.monotonic()`` readings.
    """
    if expires_in <= timedelta(0) or last_used_at is None:
        return False
    window = max(expires_in - EXPIRY_MARGIN, timedelta(0))
    if now is None:
        now = time.monotonic()
    return now - last_used_at >= window.total_seconds()


class TokenManager:
    """Owns the bearer token and decides when to sign in again.

    All token fields are read and written under one lock, and sign-in runs
    while that lock is held: callers arriving during a sign-in wait for it
    and then reuse its token, so concurrent callers trigger at most one
    sign-in.
    """

    def __init__(self, credentials: Credentials | None, sign_in: SignIn) -> None:
        self._credentials = credentials or Credentials()
        self._sign_in = sign_in
        self._lock = threading.Lock()
        self._token = ""
        self._expires_in = timedelta(0)
        # time.monotonic() of the last use
        self._last_used_at: float | None = None

    @property
    def has_credentials(self) -> bool:
        return self._credentials.is_complete

    def ensure_token(self, cancel: threading.Event | None = None) -> str:
        """Return a usable token, signing in first if needed.

        Returns an empty string when no credentials are configured and no
        token was supplied; the request then goes out unauthenticated.

        Raises:
            MissingCredentials, AuthFailed, DecodeError: from the sign-in.
            Cancelled: ``cancel`` fired before the sign-in was dispatched.
        """
        with self._lock:
            if self._token and not self._needs_refresh():
                return self._token
            if not self.has_credentials:
                return self._token

            if self._token:
                logger.info("Bearer token expired, signing in again")
            else:
                logger.info("No bearer token yet, signing in")
            response = self._sign_in(self._credentials, cancel)
            self._token = response.access_token
            self._expires_in = timedelta(seconds=response.expires_in)
            self._last_used_at = None
            return self._token

    def mark_used(self) -> None:
        """Record that the token was just attached to an outgoing request."""
        with self._lock:
            self._last_used_at = time.monotonic()

    def set_token(self, token: str, expires_in: timedelta | None = None) -> None:
        """Install a caller-supplied token, e.g. one obtained out of band."""
        with self._lock:
            self._token = token
            self._expires_in = expires_in or timedelta(0)
            self._last_used_at = None

    def get_status(self) -> TokenStatus:
        """Snapshot of the current token state."""
        with self._lock:
            return TokenStatus(
                has_token=bool(self._token),
                has_credentials=self.has_credentials,
                is_expired=bool(self._token) and self._needs_refresh(),
                expires_in=self._expires_in or None,
                last_used_at=self._last_used_wall_time(),
            )

    def _last_used_wall_time(self) -> datetime | None:
        if self._last_used_at is None:
            return None
        return datetime.now() - timedelta(seconds=time.monotonic() - self._last_used_at)

    def _needs_refresh(self) -> bool:
        # Without credentials there is nothing to refresh with.
        if not self.has_credentials:
            return False
        return token_expired(self._expires_in, self._last_used_at)
