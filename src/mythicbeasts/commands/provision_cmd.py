"""CLI commands for following provisioning jobs."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from mythicbeasts.client import MythicBeastsClient
from mythicbeasts.config import get_config
from mythicbeasts.services.servers import status_check
from mythicbeasts.utils.errors import handle_error
from mythicbeasts.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="provision", help="Follow asynchronous provisioning jobs.")


@app.command()
def wait(
    location: Annotated[str, typer.Argument(help="Poll location returned by a create call")],
    identifier: Annotated[str, typer.Option("--identifier", "-i", help="Server identifier")],
    family: Annotated[str, typer.Option("--family", "-f", help="Resource family (vps, pi)")] = "vps",
    ready_status: Annotated[str, typer.Option("--ready-status", help="Status that means provisioning is done")] = "running",
    timeout: Annotated[Optional[float], typer.Option("--timeout", "-t", help="Seconds to wait")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Poll a provisioning location until the server is ready."""
    config = get_config()
    client = MythicBeastsClient(config.settings)

    try:
        base_url = config.get_endpoint(family)
        wait_for = timeout if timeout is not None else config.settings.provision_timeout
        console.print(
            f"Waiting up to {wait_for:g}s for [bold]{identifier}[/bold] to become {ready_status}...",
            style="yellow",
        )
        server_location = client.poll_provisioning(
            base_url,
            location,
            wait_for,
            identifier,
            status_check(f"/{family.lower()}/servers", ready_status),
        )
        print_output(
            {"identifier": identifier, "status": "ready", "location": server_location},
            output,
            title="Provisioned",
        )
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
