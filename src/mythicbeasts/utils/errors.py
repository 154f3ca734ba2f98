"""Structured error handling for agent-friendly CLI output."""

from __future__ import annotations

import json
import sys

import httpx
from rich.console import Console

from mythicbeasts.errors import (
    AuthFailed,
    Cancelled,
    DecodeError,
    IdentifierConflict,
    InvalidBaseURL,
    InvalidEndpoint,
    MissingCredentials,
    MissingPollLocation,
    PollFailed,
    PollTimedOut,
    UnexpectedPollStatus,
    UnexpectedStatus,
)

console = Console(stderr=True)

# (exception type, error code, hint); first match wins
_ERROR_CODES: list[tuple[type[BaseException], str, str | None]] = [
    (MissingCredentials, "MISSING_CREDENTIALS", "Set MYTHICBEASTS_KEY_ID and MYTHICBEASTS_SECRET (or a .env file)"),
    (AuthFailed, "AUTH_ERROR", "Check the API key ID and secret, and that the key is enabled"),
    (InvalidBaseURL, "INVALID_CONFIG", "Check the base URLs in config/endpoints.yaml"),
    (InvalidEndpoint, "INVALID_ARGUMENT", "The endpoint or location is not a valid URL"),
    (PollTimedOut, "TIMEOUT", "Provisioning is still running — poll again later or raise --timeout"),
    (PollFailed, "PROVISIONING_FAILED", "The server could not be provisioned — see the message for details"),
    (MissingPollLocation, "UNEXPECTED_RESPONSE", None),
    (UnexpectedPollStatus, "UNEXPECTED_STATUS", None),
    (IdentifierConflict, "CONFLICT", "Choose a different identifier"),
    (UnexpectedStatus, "UNEXPECTED_STATUS", None),
    (DecodeError, "DECODE_ERROR", None),
    (Cancelled, "CANCELLED", None),
    (httpx.TimeoutException, "TIMEOUT", "Request timed out — try again or check network connectivity"),
    (httpx.TransportError, "CONNECTION_ERROR", "Connection error — check network connectivity"),
]

# Fallback hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("401", "Token rejected — run `mythicbeasts auth login` to check credentials"),
    ("403", "The API key lacks permission for this resource"),
    ("404", "The resource does not exist — verify the identifier"),
    ("timeout", "Request timed out — try again or check network connectivity"),
    ("connection", "Connection error — check network connectivity"),
]


def _classify(error: Exception) -> tuple[str, str | None]:
    """Map an exception to an error code and hint."""
    for exc_type, code, hint in _ERROR_CODES:
        if isinstance(error, exc_type):
            return code, hint or _get_hint(str(error))
    return "RUNTIME_ERROR", _get_hint(str(error))


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "AUTH_ERROR", "message": "...", "hint": "..."}
    """
    message = str(error)
    code, hint = _classify(error)

    error_obj: dict[str, object] = {
        "error": True,
        "code": code,
        "message": message,
    }
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        error_obj["status_code"] = status_code
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
