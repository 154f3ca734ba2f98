"""Shared plumbing for resource services bound to one API base URL."""

from __future__ import annotations

import json
import threading
from functools import lru_cache
from typing import Any, NamedTuple

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from mythicbeasts.client import MythicBeastsClient
from mythicbeasts.errors import DecodeError, EncodeError
from mythicbeasts.polling import ReadyCheck
from mythicbeasts.utils.responses import expect_status, read_body


class JSONResult(NamedTuple):
    """Outcome of a JSON round trip: the response, its raw body, and decoded data."""
    response: httpx.Response
    body: str
    data: Any


def encode_json(payload: Any) -> bytes:
    """Serialise a request body; pydantic models drop unset (None) fields.

    NaN and infinities have no JSON form and raise EncodeError.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    try:
        return json.dumps(payload, allow_nan=False).encode()
    except (TypeError, ValueError) as e:
        raise EncodeError(f"could not encode request body: {e}") from e


@lru_cache(maxsize=128)
def _adapter(out: Any) -> TypeAdapter:
    return TypeAdapter(out)


def decode_json(body: str, out: Any) -> Any:
    """Validate ``body`` into ``out`` (dict, a model, list[Model], ...)."""
    try:
        return _adapter(out).validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"could not decode response: {e}", body) from e


class BaseService:
    """A client bound to one base URL (e.g. the VPS or Pi API)."""

    def __init__(self, client: MythicBeastsClient, base_url: str) -> None:
        self._client = client
        self.base_url = base_url

    @property
    def client(self) -> MythicBeastsClient:
        return self._client

    def get_json(
        self,
        endpoint: str,
        out: Any = None,
        *allowed_status: int,
        cancel: threading.Event | None = None,
    ) -> JSONResult:
        """GET ``endpoint`` and decode the JSON response.

        Args:
            endpoint: Path relative to the base URL, or an absolute URL.
            out: Type to decode into; None skips decoding.
            allowed_status: Acceptable status codes. Empty accepts any.

        Raises:
            UnexpectedStatus: status not in ``allowed_status``.
            DecodeError: body does not match ``out``.
        """
        response = self._client.get(self.base_url, endpoint, cancel=cancel)
        return self._finish(response, out, allowed_status)

    def do_json(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        out: Any = None,
        *allowed_status: int,
        cancel: threading.Event | None = None,
    ) -> JSONResult:
        """Send ``body`` as JSON and decode the JSON response.

        The body is serialised before anything is sent, so an unserialisable
        body raises EncodeError without a network call.
        """
        content = None
        headers = None
        if body is not None:
            content = encode_json(body)
            headers = {"Content-Type": "application/json"}

        response = self._client.request(
            method, self.base_url, endpoint, content=content, headers=headers, cancel=cancel
        )
        return self._finish(response, out, allowed_status)

    def poll_provisioning(
        self,
        poll_location: str,
        timeout: float,
        identifier: str,
        check: ReadyCheck,
        cancel: threading.Event | None = None,
    ) -> str:
        return self._client.poll_provisioning(
            self.base_url, poll_location, timeout, identifier, check, cancel=cancel
        )

    def _finish(
        self,
        response: httpx.Response,
        out: Any,
        allowed_status: tuple[int, ...],
    ) -> JSONResult:
        text = read_body(response)
        if allowed_status:
            expect_status(response, text, *allowed_status)
        data = decode_json(text, out) if out is not None else None
        return JSONResult(response, text, data)
