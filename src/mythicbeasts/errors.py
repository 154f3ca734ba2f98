"""Exception hierarchy for the Mythic Beasts API client.

Transport failures (DNS, refused connections, read errors) are not wrapped:
they surface as the ``httpx.HTTPError`` subclass httpx raised.
"""

from __future__ import annotations


class MythicBeastsError(Exception):
    """Base class for every error raised by this package."""


# ── Configuration / caller input ────────────────────────────────────


class InvalidBaseURL(MythicBeastsError):
    """The base URL is missing a scheme or host."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        super().__init__(f"invalid base url: {base_url!r}")


class InvalidEndpoint(MythicBeastsError):
    """The endpoint string could not be parsed as a URL."""

    def __init__(self, endpoint: str, reason: str = "") -> None:
        self.endpoint = endpoint
        message = f"invalid endpoint: {endpoint!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EmptyIdentifier(MythicBeastsError, ValueError):
    def __init__(self) -> None:
        super().__init__("identifier is required")


class IdentifierConflict(MythicBeastsError):
    """The requested resource identifier is already in use."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"identifier {identifier!r} already in use")


# ── Authentication ──────────────────────────────────────────────────


class MissingCredentials(MythicBeastsError):
    """Sign-in was attempted without a key ID and secret."""

    def __init__(self) -> None:
        super().__init__("define key_id and secret")


class AuthFailed(MythicBeastsError):
    """The auth service answered with something other than 200."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"auth failed: status {status_code}: {body}")


# ── Responses ───────────────────────────────────────────────────────


class UnexpectedStatus(MythicBeastsError):
    """A response status outside the caller's accepted set."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"unexpected status {status_code}: {body}")


class DecodeError(MythicBeastsError, ValueError):
    """A response body could not be decoded into the requested shape."""

    def __init__(self, message: str, body: str = "") -> None:
        self.body = body
        super().__init__(message)


class EncodeError(MythicBeastsError, ValueError):
    """A request body could not be serialised to JSON."""


# ── Provisioning ────────────────────────────────────────────────────


class PollTimedOut(MythicBeastsError):
    """Provisioning did not finish before the caller's timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"timed out while provisioning (after {timeout:g}s)")


class PollFailed(MythicBeastsError):
    """The provisioning status endpoint reported a failure (HTTP 500)."""

    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(f"provisioning failed: {body}")


class MissingPollLocation(MythicBeastsError):
    """A create call was accepted (202) but named no location to poll."""

    def __init__(self) -> None:
        super().__init__("missing header location for polling")


class PollNoLocation(MythicBeastsError):
    def __init__(self) -> None:
        super().__init__("polling returned no location")


class UnexpectedPollStatus(MythicBeastsError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"unexpected status while polling: {status_code}")


class Cancelled(MythicBeastsError):
    """The caller's cancellation event fired."""

    def __init__(self) -> None:
        super().__init__("operation cancelled")
