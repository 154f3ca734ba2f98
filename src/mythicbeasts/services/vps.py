"""VPS service."""

from __future__ import annotations

from mythicbeasts.client import MythicBeastsClient
from mythicbeasts.config import DEFAULT_ENDPOINTS
from mythicbeasts.services.servers import ServerService


class VPSService(ServerService):
    """Virtual servers under ``/vps/servers``; ready once status is ``running``."""

    path_prefix = "/vps/servers"
    ready_status = "running"

    def __init__(self, client: MythicBeastsClient, base_url: str = DEFAULT_ENDPOINTS["vps"]) -> None:
        super().__init__(client, base_url)
