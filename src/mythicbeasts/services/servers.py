"""Create/get/delete for server-like resources that provision asynchronously."""

from __future__ import annotations

import logging
import threading
from typing import Any

from mythicbeasts.errors import (
    EmptyIdentifier,
    IdentifierConflict,
    MissingPollLocation,
    UnexpectedStatus,
)
from mythicbeasts.polling import ReadyCheck
from mythicbeasts.services.base import BaseService

logger = logging.getLogger(__name__)


def status_check(path_prefix: str, ready_status: str) -> ReadyCheck:
    """Build a ReadyCheck that is done once ``status`` equals ``ready_status``.

    The finished resource is then found at ``{path_prefix}/{identifier}``.
    """

    def check(data: dict[str, Any], identifier: str) -> tuple[str, bool]:
        status = data.get("status")
        logger.info(f"{path_prefix}[{identifier}] provisioning status={status!r}")
        if status == ready_status:
            return f"{path_prefix}/{identifier}", True
        return "", False

    return check


class ServerService(BaseService):
    """Base for the VPS and Pi services; subclasses set the path and ready status."""

    path_prefix = ""
    ready_status = ""
    default_timeout = 300.0

    def get(self, identifier: str, cancel: threading.Event | None = None) -> dict[str, Any]:
        """Fetch one server by identifier."""
        if not identifier.strip():
            raise EmptyIdentifier()
        result = self.get_json(f"{self.path_prefix}/{identifier}", dict, 200, cancel=cancel)
        return result.data

    def delete(self, identifier: str, cancel: threading.Event | None = None) -> None:
        """Delete a server; deleting one that does not exist is not an error."""
        if not identifier.strip():
            raise EmptyIdentifier()
        self._client.delete(self.base_url, f"{self.path_prefix}/{identifier}", cancel=cancel)

    def create(
        self,
        identifier: str,
        request: dict[str, Any],
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> dict[str, Any]:
        """Provision a server and block until it is ready.

        Returns:
            The server as reported by the API once provisioning finished.

        Raises:
            EmptyIdentifier: blank identifier.
            IdentifierConflict: the identifier is already in use (409).
            UnexpectedStatus: anything but 202 from the create call.
            MissingPollLocation: the 202 carried no Location to poll.
            PollTimedOut, PollFailed, Cancelled: from the poller.
        """
        if not identifier.strip():
            raise EmptyIdentifier()

        response, body, _ = self.do_json(
            "POST", f"{self.path_prefix}/{identifier}", request, cancel=cancel
        )

        if response.status_code == 409:
            raise IdentifierConflict(identifier)
        if response.status_code != 202:
            raise UnexpectedStatus(response.status_code, body)

        poll_location = response.headers.get("Location", "")
        if not poll_location:
            raise MissingPollLocation()

        logger.info(f"{self.path_prefix}[{identifier}] accepted, polling {poll_location}")
        server_location = self.poll_provisioning(
            poll_location,
            timeout if timeout is not None else self.default_timeout,
            identifier,
            status_check(self.path_prefix, self.ready_status),
            cancel=cancel,
        )

        return self.get_json(server_location, dict, 200, cancel=cancel).data
