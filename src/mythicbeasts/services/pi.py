"""Raspberry Pi service."""

from __future__ import annotations

from mythicbeasts.client import MythicBeastsClient
from mythicbeasts.config import DEFAULT_ENDPOINTS
from mythicbeasts.services.servers import ServerService


class PiService(ServerService):
    """Raspberry Pi servers under ``/pi/servers``; ready once status is ``live``."""

    path_prefix = "/pi/servers"
    ready_status = "live"

    def __init__(self, client: MythicBeastsClient, base_url: str = DEFAULT_ENDPOINTS["pi"]) -> None:
        super().__init__(client, base_url)
