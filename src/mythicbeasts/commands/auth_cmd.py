"""CLI commands for authentication."""

from __future__ import annotations

from typing import Annotated, Any

import typer
from rich.console import Console

from mythicbeasts.client import MythicBeastsClient
from mythicbeasts.config import get_config
from mythicbeasts.errors import MissingCredentials
from mythicbeasts.models.auth import TokenStatus
from mythicbeasts.utils.errors import handle_error
from mythicbeasts.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Check API credentials.")


def _status_dict(status: TokenStatus) -> dict[str, Any]:
    return {
        "has_credentials": status.has_credentials,
        "has_token": status.has_token,
        "is_expired": status.is_expired,
        "expires_in": int(status.expires_in.total_seconds()) if status.expires_in else None,
    }


@app.command()
def login(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Sign in with the configured API key and show the token status."""
    config = get_config()
    client = MythicBeastsClient(config.settings)

    try:
        if not client.tokens.has_credentials:
            raise MissingCredentials()
        console.print(f"Signing in to [bold]{client.auth_url}[/bold]...", style="yellow")
        client.tokens.ensure_token()
        result = {"status": "authenticated", **_status_dict(client.tokens.get_status())}
        print_output(result, output, title="Authentication")
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command()
def status(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show which credentials are configured, without signing in."""
    config = get_config()
    client = MythicBeastsClient(config.settings)

    result = {
        "auth_url": client.auth_url,
        "key_id": config.settings.key_id or None,
        **_status_dict(client.tokens.get_status()),
    }
    print_output(result, output, title="Token Status")
    client.close()
