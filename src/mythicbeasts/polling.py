"""Provisioning poller.

Creating a server is asynchronous: the API answers 202 with a poll location,
and that location then reports progress in more than one way. Sometimes it
redirects (303, or a Location header on 202/200) straight to the finished
resource; sometimes it returns 200 with a status body that only the caller
knows how to read. ``poll_provisioning`` folds all of these into a single
blocking call. Whether a status body means "done" is decided by the caller's
``ReadyCheck``, never here.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import TYPE_CHECKING, Any, Callable

from mythicbeasts.errors import (
    Cancelled,
    DecodeError,
    PollFailed,
    PollNoLocation,
    PollTimedOut,
    UnexpectedPollStatus,
)
from mythicbeasts.urls import resolve_url
from mythicbeasts.utils.responses import read_body

if TYPE_CHECKING:
    from mythicbeasts.client import MythicBeastsClient

logger = logging.getLogger(__name__)

# (status body, identifier) -> (resource location, done)
ReadyCheck = Callable[[dict[str, Any], str], tuple[str, bool]]


def poll_provisioning(
    client: MythicBeastsClient,
    base_url: str,
    poll_location: str,
    timeout: float,
    identifier: str,
    check: ReadyCheck,
    *,
    cancel: threading.Event | None = None,
) -> str:
    """Poll ``poll_location`` until the resource is ready, fails, or times out.

    Args:
        client: Client used for every poll request.
        base_url: Base URL a relative ``poll_location`` is resolved against.
        poll_location: Location returned by the create call.
        timeout: Seconds to keep polling before giving up.
        identifier: Passed through to ``check``.
        check: Readiness predicate for 200 responses without a Location.
        cancel: Event that aborts the poll when set.

    Returns:
        Location of the provisioned resource.

    Raises:
        Cancelled: ``cancel`` was set before or during a poll.
        PollTimedOut: ``timeout`` elapsed.
        PollFailed: the status endpoint returned 500.
        PollNoLocation: a 303 arrived without a Location header.
        UnexpectedPollStatus: any other status code.
        DecodeError: a 200 status body was not a JSON object.
    """
    deadline = time.monotonic() + timeout
    interval = client.poll_interval

    # Resolve once up front so configuration errors surface before any wait.
    resolve_url(base_url, poll_location)

    attempt = 0
    while True:
        if cancel is not None and cancel.is_set():
            raise Cancelled()
        if time.monotonic() > deadline:
            raise PollTimedOut(timeout)

        attempt += 1
        response = client.get(base_url, poll_location, cancel=cancel)
        body = read_body(response)
        location = response.headers.get("Location", "")
        status = response.status_code
        logger.info(f"[poll {attempt}] {identifier}: HTTP {status}")

        if status == 303:
            if not location:
                raise PollNoLocation()
            return location
        elif status == 500:
            raise PollFailed(body)
        elif status == 202:
            if location:
                return location
        elif status == 200:
            if location:
                return location
            ready_location, done = check(_decode_status(body), identifier)
            if done:
                return ready_location
        else:
            raise UnexpectedPollStatus(status)

        _wait(interval, deadline, cancel)


def _decode_status(body: str) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"could not decode provisioning status: {e}", body) from e
    if not isinstance(data, dict):
        raise DecodeError("provisioning status is not a JSON object", body)
    return data


def _wait(interval: float, deadline: float, cancel: threading.Event | None) -> None:
    """Sleep until the next poll; never past the deadline, and wake on cancel."""
    remaining = max(deadline - time.monotonic(), 0.0)
    delay = min(interval, remaining)
    if cancel is None:
        time.sleep(delay)
    elif cancel.wait(delay):
        raise Cancelled()
