"""Helpers for consuming httpx responses."""

from __future__ import annotations

import httpx

from mythicbeasts.errors import UnexpectedStatus

_MAX_ERROR_BODY = 512


def read_body(response: httpx.Response) -> str:
    """Read and close a response body. Safe to call on an already-read response."""
    try:
        response.read()
        return response.text
    finally:
        response.close()


def truncate_body(body: str, limit: int = _MAX_ERROR_BODY) -> str:
    """Shorten a response body for use in an error message."""
    if len(body) <= limit:
        return body
    return body[:limit] + "..."


def expect_status(response: httpx.Response, body: str, *allowed_status: int) -> None:
    """Raise UnexpectedStatus unless the response status is one of ``allowed_status``."""
    if response.status_code in allowed_status:
        return
    raise UnexpectedStatus(response.status_code, body)
